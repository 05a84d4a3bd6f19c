# app/api/endpoints/reports.py

from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from app.api.deps import get_db_session
from app.core.rbac import Authorize
from app.models.user import User
from app.services.pdf_service import generate_statistics_pdf

router = APIRouter(prefix="/api/reports", tags=["Reports"])


@router.get("/generate-statistics")
async def generate_statistics_report(
    current_user: User = Depends(Authorize("generate_statistics_report")),
    session: AsyncSession = Depends(get_db_session)
):
    try:
        pdf_bytes = await generate_statistics_pdf(session)
    except RuntimeError as e:
        raise HTTPException(status_code=500, detail=str(e))

    logger.info(f"Statistics report generated by {current_user.username}")
    filename = f"club-statistics-{datetime.now().strftime('%Y%m%d')}.pdf"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
