from .dependencies import auth_required, permission_dependency, require_admin
from .permissions import BasePermission, HasRole, IsAdmin, IsAuthenticated

__all__ = [
    "BasePermission",
    "HasRole",
    "IsAdmin",
    "IsAuthenticated",
    "auth_required",
    "permission_dependency",
    "require_admin",
]
