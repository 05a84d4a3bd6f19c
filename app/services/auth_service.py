# app/services/auth_service.py

from sqlmodel import select, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
import uuid

from app.core.config import settings
from app.core.policy import Principal, Role
from app.core.security import (
    hash_password,
    verify_password,
    create_access_token,
)
from app.models.user import User
from app.schemas.auth import TokenWithUser
from app.schemas.user import UserRead


# ============================================================================
# FETCH USER
# ============================================================================
async def get_user_by_id(session: AsyncSession, user_id: uuid.UUID) -> User | None:
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_username(session: AsyncSession, username: str) -> User | None:
    result = await session.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user_by_login(session: AsyncSession, identifier: str) -> User | None:
    identifier = identifier.strip()
    result = await session.execute(
        select(User).where(or_(User.username == identifier, User.email == identifier))
    )
    return result.scalars().first()


# ============================================================================
# CREATE USER
# ============================================================================
async def create_user(
    session: AsyncSession,
    username: str,
    password: str,
    role: Role = Role.Student,
    email: str | None = None,
    **profile,
) -> User:
    # Duplicate check up front gives a clean message; the unique index still guards races
    clauses = [User.username == username]
    if email:
        clauses.append(User.email == email)
    dup = await session.execute(select(User).where(or_(*clauses)))
    if dup.scalars().first():
        raise ValueError("User already exists")

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        role=role,
        **profile,
    )
    session.add(user)

    try:
        await session.commit()
        await session.refresh(user)
        return user

    except IntegrityError:
        await session.rollback()
        raise ValueError("User already exists")


# ============================================================================
# AUTHENTICATE
# ============================================================================
async def authenticate_user(session: AsyncSession, identifier: str, password: str) -> User | None:
    user = await get_user_by_login(session, identifier)
    if not user:
        return None

    if not verify_password(password, user.password_hash):
        return None

    return user


def create_login_response(user: User) -> TokenWithUser:
    role = user.role.value if isinstance(user.role, Role) else str(user.role)

    token = create_access_token(
        subject=str(user.id),
        data={"username": user.username, "role": role},
    )

    return TokenWithUser(
        access_token=token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserRead.model_validate(user),
    )


# ============================================================================
# PRINCIPAL (fresh per request)
# ============================================================================
def principal_from_user(user: User) -> Principal:
    return Principal(
        id=str(user.id),
        role=Role(user.role),
        committee_post=user.committee_post,
        committee_role=user.committee_role,
        is_committee=bool(user.is_committee),
        is_executive=bool(user.is_executive),
        is_representative=bool(user.is_representative),
        is_developer=bool(user.is_developer),
        managed_department=user.managed_department,
    )


# ============================================================================
# PASSWORDS
# ============================================================================
async def change_password(session: AsyncSession, user: User, old_password: str, new_password: str) -> None:
    if not verify_password(old_password, user.password_hash):
        raise ValueError("Old password incorrect")

    if old_password == new_password:
        raise ValueError("New password must be different")

    user.password_hash = hash_password(new_password)
    session.add(user)
    await session.commit()


async def reset_password(session: AsyncSession, username: str, new_password: str) -> User:
    user = await get_user_by_username(session, username)
    if not user:
        raise LookupError("User not found")

    user.password_hash = hash_password(new_password)
    session.add(user)
    await session.commit()
    return user
