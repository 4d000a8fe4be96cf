"""Page rendering lifecycle.

Every page is rendered by :func:`render_page`, which runs the same fixed
sequence for all pages::

    header -> metadata -> body -> footer

Concrete pages supply ``emit_metadata`` and ``emit_body``; header, body
opening (cookie banner, navigation) and footer come from :class:`Page` and
can be tuned with class flags. Each section is emitted exactly once and in
order, enforced by :class:`PageRenderContext`.
"""
import enum
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.core.consent import ALLOW_ANALYTICS_KEY, ALLOW_NECESSARY_KEY, CookieConsent
from src.core.escaping import escape, escape_all
from src.services.catalog import ServiceCatalog, get_current_page
from src.services.footer import clean_phone, load_footer_settings, load_nav_phone
from src.services.settings import SettingsResolver

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=settings.templates_dir)

GOOGLE_FONTS_PRECONNECT = ["https://fonts.googleapis.com", "https://fonts.gstatic.com"]


class PageError(Exception):
    """Base exception for page rendering errors."""

    pass


class PageConstructionError(PageError):
    """Raised when a page cannot acquire the resources it needs."""

    pass


class RenderOrderError(PageError):
    """Raised when a render section is emitted out of order or twice."""

    pass


class RenderPhase(enum.IntEnum):
    CONSTRUCTED = 0
    METADATA_EMITTED = 1
    BODY_EMITTED = 2
    FINALIZED = 3


SECTIONS = ("header", "metadata", "body", "footer")

# Phase a section may be emitted in
SECTION_PHASE = {
    "header": RenderPhase.CONSTRUCTED,
    "metadata": RenderPhase.CONSTRUCTED,
    "body": RenderPhase.METADATA_EMITTED,
    "footer": RenderPhase.BODY_EMITTED,
}

# Section that must be emitted before entering a phase
PHASE_REQUIRES = {
    RenderPhase.METADATA_EMITTED: "metadata",
    RenderPhase.BODY_EMITTED: "body",
    RenderPhase.FINALIZED: "footer",
}


@dataclass
class PageRenderContext:
    """State of a single page render."""

    title: str
    phase: RenderPhase = RenderPhase.CONSTRUCTED
    sections: list[str] = field(default_factory=list)
    parts: list[str] = field(default_factory=list)

    def emit(self, section: str, markup: str) -> None:
        if section not in SECTION_PHASE:
            raise RenderOrderError(f"Unknown section: {section}")
        if section in self.sections:
            raise RenderOrderError(f"Section {section!r} already emitted")
        if self.sections and SECTIONS.index(section) < SECTIONS.index(self.sections[-1]):
            raise RenderOrderError(
                f"Section {section!r} cannot follow {self.sections[-1]!r}"
            )
        if self.phase is not SECTION_PHASE[section]:
            raise RenderOrderError(
                f"Section {section!r} not allowed in phase {self.phase.name}"
            )
        self.sections.append(section)
        self.parts.append(markup)

    def advance(self, phase: RenderPhase) -> None:
        if phase != self.phase + 1:
            raise RenderOrderError(f"Cannot move from {self.phase.name} to {phase.name}")
        if PHASE_REQUIRES[phase] not in self.sections:
            raise RenderOrderError(
                f"Cannot enter {phase.name} before emitting {PHASE_REQUIRES[phase]!r}"
            )
        self.phase = phase

    def output(self) -> str:
        if self.phase is not RenderPhase.FINALIZED:
            raise RenderOrderError(f"Render incomplete (phase {self.phase.name})")
        return "".join(self.parts)


class Page(ABC):
    """Base class for server-rendered pages.

    A page owns the database session it is constructed with for the
    duration of the request, and one :class:`SettingsResolver` so the
    settings table is read at most once per render.
    """

    title: str = ""
    show_navigation: bool = True
    show_footer: bool = True
    show_cookie_banner: bool = True

    def __init__(
        self,
        db: Optional[AsyncSession],
        *,
        consent: CookieConsent,
        session_token: str,
        current_path: str = "/",
    ):
        if db is None:
            raise PageConstructionError(
                f"{type(self).__name__}: database session unavailable"
            )
        self.db = db
        self.consent = consent
        self.session_token = session_token
        self.current_path = current_path
        self.resolver = SettingsResolver(db)
        self.render_context: Optional[PageRenderContext] = None
        self._services: Optional[list[dict[str, str]]] = None

    def render_fragment(self, template_name: str, **context: Any) -> str:
        return templates.get_template(template_name).render(**context)

    def metadata_links(
        self,
        stylesheets: tuple[str, ...] = (),
        scripts: tuple[str, ...] = (),
        fonts: tuple[str, ...] = (),
    ) -> str:
        """Render <link>/<script> tags; third-party fonts need analytics consent."""
        if not self.consent.is_category_allowed("analytics"):
            fonts = ()
        return self.render_fragment(
            "layout/metadata.html",
            preconnect=GOOGLE_FONTS_PRECONNECT if fonts else [],
            fonts=[escape(url) for url in fonts],
            stylesheets=[escape(url) for url in stylesheets],
            scripts=[escape(url) for url in scripts],
        )

    async def emit_header(self) -> str:
        return self.render_fragment(
            "layout/header.html",
            title=escape(self.title),
            session_token=escape(self.session_token),
        )

    @abstractmethod
    async def emit_metadata(self) -> str:
        """Page-specific <link>/<script> tags for the document head."""

    async def emit_body_open(self) -> str:
        show_banner = self.show_cookie_banner and self.consent.should_show_banner(
            self.current_path
        )
        nav = await self._navigation() if self.show_navigation else None
        return self.render_fragment(
            "layout/body_open.html",
            show_banner=show_banner,
            nav=nav,
            session_token=escape(self.session_token),
            necessary_key=ALLOW_NECESSARY_KEY,
            analytics_key=ALLOW_ANALYTICS_KEY,
        )

    @abstractmethod
    async def emit_body(self) -> str:
        """Main page content."""

    async def emit_footer(self) -> str:
        footer = await self._site_footer() if self.show_footer else None
        return self.render_fragment("layout/footer.html", footer=footer)

    async def active_services(self) -> list[dict[str, str]]:
        if self._services is None:
            self._services = await ServiceCatalog(self.db).list_active()
        return self._services

    async def _navigation(self) -> dict[str, Any]:
        current_page = get_current_page(self.current_path)
        services = await self.active_services()
        phone = await load_nav_phone(self.resolver)
        return {
            "home_active": current_page == "home",
            "services": [
                {
                    "slug": escape(service["slug"]),
                    "name": escape(service["name"]),
                    "active": service["slug"] == current_page,
                }
                for service in services
            ],
            "phone_clean": escape(clean_phone(phone)),
        }

    async def _site_footer(self) -> dict[str, Any]:
        values = await load_footer_settings(self.resolver)
        services = await self.active_services()
        footer = escape_all(values, values.keys())
        footer["services"] = [
            {"slug": escape(s["slug"]), "name": escape(s["name"])} for s in services
        ]
        return footer


async def render_page(page: Page) -> str:
    """Run the fixed render sequence for a page and return the document."""
    if page.render_context is not None:
        raise RenderOrderError(f"{type(page).__name__} has already been rendered")

    context = PageRenderContext(title=page.title)
    page.render_context = context

    context.emit("header", await page.emit_header())
    context.emit("metadata", await page.emit_metadata())
    context.advance(RenderPhase.METADATA_EMITTED)

    context.emit("body", await page.emit_body_open() + await page.emit_body())
    context.advance(RenderPhase.BODY_EMITTED)

    context.emit("footer", await page.emit_footer())
    context.advance(RenderPhase.FINALIZED)

    logger.debug("Rendered %s: %s", type(page).__name__, ", ".join(context.sections))
    return context.output()
