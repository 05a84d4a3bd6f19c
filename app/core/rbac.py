# app/core/rbac.py

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from loguru import logger

from app.api.deps import get_current_user
from app.core.policy import DEFAULT_RULES, ResourceScope, authorize, validate_actions
from app.models.user import User
from app.services.auth_service import principal_from_user


# Every action some route guards; checked again against the rule table at startup
GUARDED_ACTIONS: set[str] = set()


def Authorize(action: str, scope_param: Optional[str] = None):
    """
    Policy-backed RBAC:
    - Admits the current user only if the policy engine allows ``action``
    - ``scope_param`` names the path parameter that carries the resource's
      department, for department-scoped actions
    - Unknown actions fail when the router is imported, not per request
    """
    validate_actions([action], DEFAULT_RULES)
    GUARDED_ACTIONS.add(action)

    async def policy_checker(request: Request, current_user: User = Depends(get_current_user)) -> User:
        scope = None
        if scope_param:
            scope = ResourceScope(department=request.path_params.get(scope_param))

        principal = principal_from_user(current_user)
        decision = authorize(principal, action, scope)
        if not decision:
            logger.warning(
                f"Policy denied '{action}' for user {principal.id} "
                f"({principal.role.value}): {decision.reason.value}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={"action": action, "reason": decision.reason.value},
            )

        return current_user

    return policy_checker


def is_allowed(user: User, action: str, scope: Optional[ResourceScope] = None) -> bool:
    """Non-raising check for routes that mix ownership with policy (e.g. own profile)."""
    return bool(authorize(principal_from_user(user), action, scope))
