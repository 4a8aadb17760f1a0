from fastapi import Depends
from app.core.dependencies import get_current_user
from app.core.exceptions import PermissionDeniedError
from app.models.user import User, RoleEnum


def require_role(*allowed_roles: RoleEnum):
    """Dependency factory that checks the caller's role."""
    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise PermissionDeniedError()
        return current_user
    return role_checker


require_admin = require_role(RoleEnum.admin)
