# app/api/endpoints/public.py

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession
from typing import List

from app.api.deps import get_db_session
from app.schemas.user import CommitteeMember
from app.services.user_service import list_committee

router = APIRouter(prefix="/api/public", tags=["Public"])


@router.get("/committee", response_model=List[CommitteeMember])
async def get_committee(session: AsyncSession = Depends(get_db_session)):
    """Committee members for the landing page. No login required."""
    return await list_committee(session)
