from src.core.escaping import escape, escape_all
from src.services.footer import clean_phone
from src.services.settings import COMPANY_FALLBACKS
from src.views.base import Page

CONTACT_SETTINGS = ("contact_phone", "contact_email", "contact_address")
DISPLAY_FONTS = (
    "https://fonts.googleapis.com/css2?family=Bebas+Neue&family=Cinzel"
    "&family=Open+Sans+Condensed:wght@300&display=swap"
)


class Contact(Page):
    title = "Kontakt"

    async def emit_metadata(self) -> str:
        return self.metadata_links(fonts=(DISPLAY_FONTS,))

    async def emit_body(self) -> str:
        fallbacks = {key: COMPANY_FALLBACKS[key] for key in CONTACT_SETTINGS}
        values = await self.resolver.load(CONTACT_SETTINGS, fallbacks)
        return self.render_fragment(
            "pages/contact.html",
            contact_phone_clean=escape(clean_phone(str(values["contact_phone"]))),
            **escape_all(values, CONTACT_SETTINGS),
        )
