from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.session import get_db
from src.views import Contact, Datenschutz, Impressum, LoginPage
from src.web.entrypoint import handle_consent_submission, serve_page

web_router = APIRouter()


@web_router.get("/contact", response_class=HTMLResponse)
async def contact_page(request: Request, db: AsyncSession = Depends(get_db)):
    return await serve_page(Contact, request, db)


@web_router.get("/impressum", response_class=HTMLResponse)
async def impressum_page(request: Request, db: AsyncSession = Depends(get_db)):
    return await serve_page(Impressum, request, db)


@web_router.get("/datenschutz", response_class=HTMLResponse)
async def datenschutz_page(request: Request, db: AsyncSession = Depends(get_db)):
    return await serve_page(Datenschutz, request, db)


@web_router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request, db: AsyncSession = Depends(get_db)):
    return await serve_page(LoginPage, request, db)


# ============= COOKIE CONSENT =============

@web_router.post("/contact")
@web_router.post("/impressum")
@web_router.post("/datenschutz")
async def save_cookie_consent(request: Request):
    """Cookie banner form posts back to the page it was shown on."""
    return await handle_consent_submission(request)
