# app/api/endpoints/site_config.py

from datetime import datetime, timezone
from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session
from app.core.rbac import Authorize
from app.models.site_config import SiteConfig, SITE_CONFIG_ID, DEFAULT_SITE_CONFIG
from app.models.user import User
from app.schemas.site_config import SiteConfigUpdate
from app.services.audit_service import audit_kwargs, log_activity

router = APIRouter(prefix="/api/config", tags=["Site Config"])


# Public: the frontend reads branding before anyone logs in
@router.get("/")
async def get_site_config(session: AsyncSession = Depends(get_db_session)):
    config = await session.get(SiteConfig, SITE_CONFIG_ID)
    if not config:
        return {"id": SITE_CONFIG_ID, **DEFAULT_SITE_CONFIG}
    return config


@router.put("/", response_model=SiteConfig)
async def update_site_config(
    data: SiteConfigUpdate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(Authorize("edit_site_config")),
    session: AsyncSession = Depends(get_db_session)
):
    config = await session.get(SiteConfig, SITE_CONFIG_ID)
    if not config:
        config = SiteConfig(id=SITE_CONFIG_ID, **DEFAULT_SITE_CONFIG)

    changes = data.model_dump(exclude_unset=True)
    for key, value in changes.items():
        setattr(config, key, value)

    config.updated_by = current_user.username
    config.updated_at = datetime.now(timezone.utc)

    session.add(config)
    await session.commit()
    await session.refresh(config)

    background_tasks.add_task(
        log_activity,
        action="CONFIG_UPDATED",
        resource_type="site_config",
        resource_id=str(SITE_CONFIG_ID),
        details=changes,
        **audit_kwargs(current_user),
    )
    return config
