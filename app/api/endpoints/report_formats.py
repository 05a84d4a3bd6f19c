# app/api/endpoints/report_formats.py

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import update
from sqlmodel import select
from typing import List, Optional
from uuid import UUID

from app.api.deps import get_db_session
from app.core.rbac import Authorize
from app.core.storage import upload_report_format
from app.models.report_format import ReportFormat
from app.models.user import User
from app.schemas.report_format import ReportFormatCreate

router = APIRouter(prefix="/api/report-formats", tags=["Report Formats"])


async def _save(session: AsyncSession, report_format: ReportFormat) -> ReportFormat:
    session.add(report_format)
    await session.commit()
    await session.refresh(report_format)
    return report_format


# -------------------------------------------------------------------
# Active format (public download link)
# -------------------------------------------------------------------
@router.get("/active", response_model=Optional[ReportFormat])
async def get_active_format(session: AsyncSession = Depends(get_db_session)):
    result = await session.execute(select(ReportFormat).where(ReportFormat.is_active == True))  # noqa: E712
    return result.scalars().first()


@router.get("/", response_model=List[ReportFormat])
async def list_formats(
    _: User = Depends(Authorize("manage_report_formats")),
    session: AsyncSession = Depends(get_db_session)
):
    result = await session.execute(select(ReportFormat).order_by(ReportFormat.created_at.desc()))
    return result.scalars().all()


# -------------------------------------------------------------------
# Register by URL, or upload a PDF to storage
# -------------------------------------------------------------------
@router.post("/", response_model=ReportFormat, status_code=status.HTTP_201_CREATED)
async def register_format(
    data: ReportFormatCreate,
    current_user: User = Depends(Authorize("manage_report_formats")),
    session: AsyncSession = Depends(get_db_session)
):
    return await _save(session, ReportFormat(**data.model_dump(), uploaded_by=current_user.id))


@router.post("/upload", response_model=ReportFormat, status_code=status.HTTP_201_CREATED)
async def upload_format(
    title: str = Form(...),
    academic_year: Optional[str] = Form(None),
    file: UploadFile = File(...),
    current_user: User = Depends(Authorize("manage_report_formats")),
    session: AsyncSession = Depends(get_db_session)
):
    file_url = await upload_report_format(file, current_user.id)
    return await _save(
        session,
        ReportFormat(
            title=title,
            academic_year=academic_year,
            file_url=file_url,
            file_name=file.filename,
            uploaded_by=current_user.id,
        ),
    )


# -------------------------------------------------------------------
# Activate (only one active format at a time)
# -------------------------------------------------------------------
@router.put("/{format_id}/activate", response_model=ReportFormat)
async def activate_format(
    format_id: UUID,
    _: User = Depends(Authorize("manage_report_formats")),
    session: AsyncSession = Depends(get_db_session)
):
    report_format = await session.get(ReportFormat, format_id)
    if not report_format:
        raise HTTPException(404, "Report format not found")

    await session.execute(
        update(ReportFormat).where(ReportFormat.id != format_id).values(is_active=False)
    )
    report_format.is_active = True
    return await _save(session, report_format)


@router.delete("/{format_id}")
async def delete_format(
    format_id: UUID,
    _: User = Depends(Authorize("manage_report_formats")),
    session: AsyncSession = Depends(get_db_session)
):
    report_format = await session.get(ReportFormat, format_id)
    if not report_format:
        raise HTTPException(404, "Report format not found")

    await session.delete(report_format)
    await session.commit()
    return {"detail": "Report format deleted"}
