from src.views.base import (
    Page,
    PageConstructionError,
    PageError,
    PageRenderContext,
    RenderOrderError,
    RenderPhase,
    render_page,
)
from src.views.contact import Contact
from src.views.legal import Datenschutz, Impressum
from src.views.login import LoginPage

__all__ = [
    "Page",
    "PageConstructionError",
    "PageError",
    "PageRenderContext",
    "RenderOrderError",
    "RenderPhase",
    "render_page",
    "Contact",
    "Datenschutz",
    "Impressum",
    "LoginPage",
]
