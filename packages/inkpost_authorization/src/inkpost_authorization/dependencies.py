import logging

from fastapi import Depends, HTTPException, Request, status
from inkpost_authentication.dependencies import get_current_user
from inkpost_authentication.schemas import AuthenticatedUser

from .permissions import BasePermission, IsAdmin, IsAuthenticated

logger = logging.getLogger(__name__)


def permission_dependency(permissions: list[BasePermission]):
    """FastAPI dependency factory for checking permissions.

    The bearer token is resolved first, so a missing or bad token answers 401
    before any permission is evaluated; a failed permission answers 403.

    Args:
        permissions (list[BasePermission]): Permissions that must all pass.
    """

    async def permission_dependency_factory(
        request: Request, user: AuthenticatedUser = Depends(get_current_user)
    ) -> AuthenticatedUser:
        for permission in permissions:
            if not await permission.has_permission(request, user):
                logger.warning(
                    "User %s (role=%s) denied %s %s by %s",
                    user.username,
                    user.role.value,
                    request.method,
                    request.url.path,
                    type(permission).__name__,
                )
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail=permission.message,
                )
        return user

    return permission_dependency_factory


auth_required = permission_dependency([IsAuthenticated()])
require_admin = permission_dependency([IsAdmin()])
