# app/api/endpoints/queries.py

from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from typing import List
from uuid import UUID

from app.api.deps import get_db_session, get_current_user
from app.core.rbac import Authorize
from app.models.enums import QueryStatus
from app.models.query import MemberQuery
from app.models.user import User
from app.schemas.query import QueryCreate, QueryResponse

router = APIRouter(prefix="/api/queries", tags=["Queries"])


@router.post("/", response_model=MemberQuery, status_code=status.HTTP_201_CREATED)
async def create_query(
    data: QueryCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    query = MemberQuery(user_id=current_user.id, query=data.query)
    session.add(query)
    await session.commit()
    await session.refresh(query)
    return query


@router.get("/my", response_model=List[MemberQuery])
async def my_queries(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    result = await session.execute(
        select(MemberQuery).where(MemberQuery.user_id == current_user.id).order_by(MemberQuery.created_at.desc())
    )
    return result.scalars().all()


@router.get("/", response_model=List[MemberQuery])
async def list_queries(
    _: User = Depends(Authorize("view_queries")),
    session: AsyncSession = Depends(get_db_session)
):
    result = await session.execute(select(MemberQuery).order_by(MemberQuery.created_at.desc()))
    return result.scalars().all()


@router.put("/{query_id}/respond", response_model=MemberQuery)
async def respond_query(
    query_id: UUID,
    data: QueryResponse,
    current_user: User = Depends(Authorize("respond_query")),
    session: AsyncSession = Depends(get_db_session)
):
    query = await session.get(MemberQuery, query_id)
    if not query:
        raise HTTPException(404, "Query not found")

    query.response = data.response
    query.status = QueryStatus.Resolved.value
    query.assigned_to = current_user.id
    query.resolved_at = datetime.now(timezone.utc)

    session.add(query)
    await session.commit()
    await session.refresh(query)
    return query
