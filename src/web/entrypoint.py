import logging

from fastapi import HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.consent import (
    ALLOW_ANALYTICS_KEY,
    CookieConsent,
    is_consent_submission,
    store_consent,
)
from src.services.auth import SessionContext, ensure_session_token, verify_session_token
from src.views.base import Page, render_page

logger = logging.getLogger(__name__)

ERROR_PAGE = (
    "<!DOCTYPE html><html><head><title>Error</title></head>"
    "<body><h1>Application Error</h1><p>Please try again later.</p></body></html>"
)


def error_response() -> HTMLResponse:
    return HTMLResponse(ERROR_PAGE, status_code=500)


async def serve_page(
    page_cls: type[Page], request: Request, db: AsyncSession
) -> HTMLResponse:
    """Build and render a page for the current request.

    Any failure while constructing or rendering the page is logged and
    answered with a generic error page; no partial markup or exception
    detail reaches the client.
    """
    try:
        session = SessionContext(request.session)
        token = ensure_session_token(session)
        page = page_cls(
            db,
            consent=CookieConsent.from_request(request),
            session_token=token,
            current_path=request.url.path,
        )
        html = await render_page(page)
    except Exception:
        logger.exception("Error rendering page %s", page_cls.__name__)
        return error_response()

    return HTMLResponse(html)


async def handle_consent_submission(request: Request) -> RedirectResponse:
    """Store the cookie banner choice and redirect back to the same page."""
    form = await request.form()
    if not is_consent_submission(form):
        raise HTTPException(status_code=400, detail="Keine Cookie-Einstellungen übermittelt")

    session = SessionContext(request.session)
    if not verify_session_token(session, form.get("token")):
        raise HTTPException(status_code=400, detail="Ungültiges Formular-Token")

    response = RedirectResponse(url=request.url.path, status_code=303)
    store_consent(response, session, allow_analytics=bool(form.get(ALLOW_ANALYTICS_KEY)))
    return response
