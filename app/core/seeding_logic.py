from sqlmodel import select
from loguru import logger

from app.core.config import settings
from app.core.database import AsyncSessionLocal
from app.core.policy import Role
from app.models.site_config import SiteConfig, SITE_CONFIG_ID, DEFAULT_SITE_CONFIG
from app.models.user import User
from app.services.auth_service import create_user, get_user_by_username


# ----------------------------------------------------------------
# SEEDING FUNCTIONS
# ----------------------------------------------------------------

async def seed_all():
    """Master function to run all seeding logic."""
    async with AsyncSessionLocal() as session:
        try:
            await seed_site_config(session)
            await seed_admin_user(session)
            logger.success("Seeding complete.")
        except Exception as e:
            logger.error(f"Seeding failed: {e}")
            await session.rollback()


async def seed_site_config(session):
    existing = await session.get(SiteConfig, SITE_CONFIG_ID)
    if existing:
        return

    logger.info("Creating default site config")
    session.add(SiteConfig(id=SITE_CONFIG_ID, **DEFAULT_SITE_CONFIG))
    await session.commit()


async def seed_admin_user(session):
    if not (settings.SUPER_ADMIN_USERNAME and settings.SUPER_ADMIN_PASSWORD):
        return

    existing = await get_user_by_username(session, settings.SUPER_ADMIN_USERNAME)
    if existing:
        return

    # Only seed while no admin exists; a later rename must not spawn a second one
    admin = await session.execute(select(User).where(User.role == Role.Admin))
    if admin.scalars().first():
        return

    await create_user(
        session,
        username=settings.SUPER_ADMIN_USERNAME,
        password=settings.SUPER_ADMIN_PASSWORD,
        role=Role.Admin,
        email=settings.SUPER_ADMIN_EMAIL,
        full_name="Super Admin",
    )
    logger.success("Super admin created.")
