import logging
from dataclasses import dataclass
from typing import Mapping

from starlette.requests import Request
from starlette.responses import Response

from src.config import settings
from src.services.auth import SessionContext

logger = logging.getLogger(__name__)

ASKED_BEFORE_KEY = "cookie_asked_before"
ALLOW_NECESSARY_KEY = "allow_necessary_cookies"
ALLOW_ANALYTICS_KEY = "allow_analytics_cookies"
SESSION_SAVED_KEY = "cookie_settings_saved"

# The banner stays hidden here so visitors can read the terms before accepting
LEGAL_PATHS = ("/datenschutz", "/agb", "/impressum")


@dataclass(frozen=True)
class CookieConsent:
    """Cookie consent state of the current visitor."""

    asked_before: bool = False
    allow_necessary: bool = False
    allow_analytics: bool = False

    @classmethod
    def from_cookies(
        cls, cookies: Mapping[str, str], saved_in_session: bool = False
    ) -> "CookieConsent":
        return cls(
            asked_before=ASKED_BEFORE_KEY in cookies or saved_in_session,
            allow_necessary=cookies.get(ALLOW_NECESSARY_KEY) == "true",
            allow_analytics=cookies.get(ALLOW_ANALYTICS_KEY) == "true",
        )

    @classmethod
    def from_request(cls, request: Request) -> "CookieConsent":
        saved = SessionContext(request.session).get(SESSION_SAVED_KEY) is True
        return cls.from_cookies(request.cookies, saved_in_session=saved)

    def is_category_allowed(self, category: str) -> bool:
        if category == "necessary":
            return self.allow_necessary
        if category == "analytics":
            return self.allow_analytics
        return False

    def should_show_banner(self, path: str) -> bool:
        if self.asked_before:
            return False
        return not any(legal in path for legal in LEGAL_PATHS)


def is_consent_submission(form: Mapping[str, str]) -> bool:
    return ALLOW_NECESSARY_KEY in form or ALLOW_ANALYTICS_KEY in form


def store_consent(
    response: Response, session: SessionContext, allow_analytics: bool
) -> None:
    """Persist a consent decision on the response and in the session.

    Necessary cookies are always enabled; analytics is the visitor's choice.
    """
    max_age = settings.consent_cookie_max_age
    response.set_cookie(ASKED_BEFORE_KEY, "1", max_age=max_age, path="/")
    response.set_cookie(ALLOW_NECESSARY_KEY, "true", max_age=max_age, path="/")
    response.set_cookie(
        ALLOW_ANALYTICS_KEY,
        "true" if allow_analytics else "false",
        max_age=max_age,
        path="/",
    )
    # Takes effect before the browser sends the new cookies back
    session.set(SESSION_SAVED_KEY, True)
    logger.info("Cookie settings saved: necessary=1, analytics=%d", int(allow_analytics))
