"""Utility modules for the Notes Site pipeline.

This package contains shared utility functions:
- frontmatter.py: YAML frontmatter parsing and related-note declarations
- identifiers.py: Note identifier normalisation and anchor slugs
"""
