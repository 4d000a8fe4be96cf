from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.db.base import Base, TimestampMixin


class Setting(Base, TimestampMixin):
    """Key-value store for site-wide settings.

    ``setting_type`` tells readers how to interpret the raw text value
    (``string``, ``int``, ``bool``, ``json``, ...).
    """
    __tablename__ = "settings"

    setting_key: Mapped[str] = mapped_column(String(100), primary_key=True)
    setting_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    setting_type: Mapped[Optional[str]] = mapped_column(
        String(20), default="string", nullable=True
    )
