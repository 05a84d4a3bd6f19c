from typing import Optional
from pydantic import BaseModel


class ReportFormatCreate(BaseModel):
    title: str
    academic_year: Optional[str] = None
    file_url: str
    file_name: Optional[str] = None
