from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime
from typing import Optional
from datetime import datetime

SITE_CONFIG_ID = 1

DEFAULT_SITE_CONFIG = {
    "site_name": "Science & Tech Club",
    "logo_url": None,
    "theme_mode": "dark",
    "primary_color": "#3b82f6",
    "watermark_opacity": "0.25",
    "git_repo_url": None,
}


class SiteConfig(SQLModel, table=True):
    """Keyed singleton: the only row has id=1."""
    __tablename__ = "site_config"

    id: int = Field(default=SITE_CONFIG_ID, primary_key=True)
    site_name: str = Field(default=DEFAULT_SITE_CONFIG["site_name"])
    logo_url: Optional[str] = None
    theme_mode: str = Field(default=DEFAULT_SITE_CONFIG["theme_mode"])
    primary_color: str = Field(default=DEFAULT_SITE_CONFIG["primary_color"])
    watermark_opacity: str = Field(default=DEFAULT_SITE_CONFIG["watermark_opacity"])
    git_repo_url: Optional[str] = None
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True)))
