from datetime import date

from src.core.escaping import escape
from src.views.base import Page

LOGIN_STYLESHEETS = (
    "/static/css/login.css",
    "https://cdnjs.cloudflare.com/ajax/libs/font-awesome/6.0.0/css/all.min.css",
)


class LoginPage(Page):
    """Admin login form. Credentials are checked by the auth API, not here."""

    title = "DS Allroundservice - Admin Login"
    show_navigation = False
    show_footer = False
    show_cookie_banner = False

    async def emit_metadata(self) -> str:
        return self.metadata_links(stylesheets=LOGIN_STYLESHEETS)

    async def emit_body(self) -> str:
        return self.render_fragment(
            "pages/login.html",
            session_token=escape(self.session_token),
            year=date.today().year,
        )
