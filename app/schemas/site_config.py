from typing import Optional
from pydantic import BaseModel


class SiteConfigUpdate(BaseModel):
    site_name: Optional[str] = None
    logo_url: Optional[str] = None
    theme_mode: Optional[str] = None
    primary_color: Optional[str] = None
    watermark_opacity: Optional[str] = None
    git_repo_url: Optional[str] = None
