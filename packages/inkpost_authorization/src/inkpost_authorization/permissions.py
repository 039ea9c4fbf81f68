from abc import ABC, abstractmethod

from fastapi import Request
from inkpost_authentication.models import Role
from inkpost_authentication.schemas import AnonymousUser, AuthenticatedUser

RequestUser = AuthenticatedUser | AnonymousUser


class BasePermission(ABC):
    """A yes/no check run against the resolved user of a request."""

    message: str = "You do not have permission to perform this action"

    @abstractmethod
    async def has_permission(self, request: Request, user: RequestUser) -> bool: ...


class IsAuthenticated(BasePermission):
    async def has_permission(
        self,
        request: Request,  # noqa: ARG002
        user: RequestUser,
    ) -> bool:
        return user.is_authenticated


class HasRole(BasePermission):
    """Passes for authenticated users holding one of ``roles``."""

    def __init__(self, *roles: Role):
        self.roles = frozenset(roles)

    async def has_permission(
        self,
        request: Request,  # noqa: ARG002
        user: RequestUser,
    ) -> bool:
        return user.is_authenticated and user.role in self.roles


class IsAdmin(HasRole):
    def __init__(self):
        super().__init__(Role.ADMIN)
