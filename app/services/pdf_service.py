import os
import shutil
from collections import Counter
from datetime import datetime

import pdfkit
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession
from jinja2 import Environment, FileSystemLoader, select_autoescape
from loguru import logger

from app.core.config import settings
from app.core.policy import Role
from app.models.enums import EventStatus, ProjectStatus
from app.models.event import Event
from app.models.project import Project
from app.models.site_config import SiteConfig, SITE_CONFIG_ID, DEFAULT_SITE_CONFIG
from app.models.user import User

# -----------------------------
# Setup Jinja2 Environment
# -----------------------------
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
template_dir = os.path.join(BASE_DIR, 'templates', 'pdf')

pdf_env = Environment(
    loader=FileSystemLoader(template_dir),
    autoescape=select_autoescape(['html', 'xml'])
)

pdf_options = {
    'page-size': 'A4',
    'margin-top': '15mm',
    'margin-right': '15mm',
    'margin-bottom': '15mm',
    'margin-left': '15mm',
    'encoding': "UTF-8",
    'no-outline': None,
}


# -----------------------------
# PDF Configuration
# -----------------------------
def get_pdf_config():
    """Built per call so a missing wkhtmltopdf binary only fails report generation."""
    path = settings.WKHTMLTOPDF_PATH or shutil.which("wkhtmltopdf")
    if not path:
        if os.name == 'nt':
            path = r"C:\Program Files\wkhtmltopdf\bin\wkhtmltopdf.exe"
        else:
            path = '/usr/bin/wkhtmltopdf'

    if not os.path.exists(path):
        logger.warning(f"wkhtmltopdf not found at {path}. PDF generation will fail.")

    return pdfkit.configuration(wkhtmltopdf=path)


# -----------------------------
# Statistics
# -----------------------------
def compute_statistics(users, events, projects) -> dict:
    roles = Counter(getattr(u.role, "value", u.role) for u in users)
    departments = Counter(u.department for u in users if u.department)
    posts = Counter(u.committee_post for u in users if u.is_committee and u.committee_post)
    event_status = Counter(e.status for e in events)
    project_status = Counter(p.status for p in projects)

    return {
        "total_users": len(users),
        "students": roles.get(Role.Student.value, 0),
        "faculty": roles.get(Role.Faculty.value, 0),
        "committee_members": sum(1 for u in users if u.is_committee),
        "departments": dict(sorted(departments.items())),
        "committee_posts": dict(sorted(posts.items())),
        "total_events": len(events),
        "pending_events": event_status.get(EventStatus.Pending.value, 0),
        "upcoming_events": event_status.get(EventStatus.Upcoming.value, 0),
        "completed_events": event_status.get(EventStatus.Completed.value, 0),
        "total_projects": len(projects),
        "open_projects": project_status.get(ProjectStatus.Open.value, 0),
        "approved_projects": project_status.get(ProjectStatus.Approved.value, 0),
        "completed_projects": project_status.get(ProjectStatus.Completed.value, 0),
    }


async def gather_statistics(session: AsyncSession) -> dict:
    users = (await session.execute(select(User))).scalars().all()
    events = (await session.execute(select(Event))).scalars().all()
    projects = (await session.execute(select(Project))).scalars().all()
    return compute_statistics(users, events, projects)


# -----------------------------
# PDF Generation Function
# -----------------------------
async def generate_statistics_pdf(session: AsyncSession) -> bytes:
    stats = await gather_statistics(session)

    config = await session.get(SiteConfig, SITE_CONFIG_ID)
    site_name = config.site_name if config else DEFAULT_SITE_CONFIG["site_name"]

    html_content = pdf_env.get_template("statistics_report.html").render(
        site_name=site_name,
        stats=stats,
        generated_on=datetime.now().strftime("%d-%m-%Y %H:%M"),
    )

    try:
        # output_path=False returns the PDF as bytes
        return pdfkit.from_string(html_content, False, configuration=get_pdf_config(), options=pdf_options)
    except OSError as e:
        logger.error(f"PDF generation failed: {e}")
        raise RuntimeError("PDF generation failed. Is wkhtmltopdf installed?")
