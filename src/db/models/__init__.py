from src.db.models.settings import Setting
from src.db.models.service import Service

__all__ = [
    "Setting",
    "Service",
]
