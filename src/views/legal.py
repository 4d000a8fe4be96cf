from src.core.escaping import escape_all
from src.services.settings import COMPANY_FALLBACKS
from src.views.base import Page

LAW_STYLESHEETS = ("/static/css/home.css", "/static/css/law.css")
LAW_SCRIPTS = ("/static/js/law-behavior.js", "/static/js/sticky-header.js")
INTER_FONT = "https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700;800&display=swap"


class LegalPage(Page):
    """Legal text page filled with company details from the settings store."""

    title = "DS-Allroundservice"
    template_name: str = ""
    required_settings: tuple[str, ...] = ()

    async def emit_metadata(self) -> str:
        return self.metadata_links(
            stylesheets=LAW_STYLESHEETS,
            scripts=LAW_SCRIPTS,
            fonts=(INTER_FONT,),
        )

    async def emit_body(self) -> str:
        fallbacks = {key: COMPANY_FALLBACKS[key] for key in self.required_settings}
        values = await self.resolver.load(self.required_settings, fallbacks)
        return self.render_fragment(
            self.template_name,
            **escape_all(values, self.required_settings),
        )


class Impressum(LegalPage):
    template_name = "pages/impressum.html"
    required_settings = (
        "site_name",
        "contact_address",
        "contact_phone",
        "contact_email",
        "company_vat_id",
    )


class Datenschutz(LegalPage):
    template_name = "pages/datenschutz.html"
    required_settings = (
        "site_name",
        "contact_address",
        "contact_phone",
        "contact_email",
    )
