import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models.service import Service

logger = logging.getLogger(__name__)


# Shown when the services table cannot be read
DEFAULT_SERVICES = [
    {"slug": "umzuege", "name": "Umzüge"},
    {"slug": "transport", "name": "Transport"},
    {"slug": "entruempelung", "name": "Entrümpelung"},
    {"slug": "aufloesung", "name": "Wohnungsauflösung"},
]

# Path fragments that identify a page for navigation highlighting
PAGE_MARKERS = [
    ("umzug", "umzuege"),
    ("transport", "transport"),
    ("entruempelung", "entruempelung"),
    ("aufloesung", "aufloesung"),
    ("contact", "contact"),
]


def get_current_page(path: str) -> str:
    """Map a request path to the page identifier used in navigation."""
    path = path.strip("/")
    if not path:
        return "home"
    for marker, page in PAGE_MARKERS:
        if marker in path:
            return page
    return path


class ServiceCatalog:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_active(self) -> list[dict[str, str]]:
        """Get active services ordered for display, or the defaults on failure."""
        try:
            result = await self.db.execute(
                select(Service.slug, Service.name)
                .where(Service.is_active == True)
                .order_by(Service.sort_order.asc(), Service.name.asc())
            )
            return [{"slug": slug, "name": name} for slug, name in result.all()]
        except SQLAlchemyError as e:
            logger.warning("Error loading services: %s", e)
            await self.db.rollback()
            return [dict(service) for service in DEFAULT_SERVICES]
