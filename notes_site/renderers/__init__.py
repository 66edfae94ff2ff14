"""Output renderers, looked up by format name."""

from ..exceptions import RenderError
from .base import Renderer
from .html_renderer import HtmlRenderer
from .json_renderer import JsonRenderer

RENDERERS: dict[str, type[Renderer]] = {
    HtmlRenderer.name: HtmlRenderer,
    JsonRenderer.name: JsonRenderer,
}


def get_renderer(output_format: str) -> Renderer:
    """Return a renderer instance for ``output_format``.

    Raises:
        RenderError: If the format is not registered
    """
    try:
        return RENDERERS[output_format.strip().lower()]()
    except KeyError:
        raise RenderError(output_format, f"unknown format; choose from {', '.join(sorted(RENDERERS))}") from None


__all__ = ["HtmlRenderer", "JsonRenderer", "RENDERERS", "Renderer", "get_renderer"]
