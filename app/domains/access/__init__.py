from app.domains.access.roles import (
    RoleLevel, RequesterContext, is_admin_or_higher, is_super_admin, is_owner, is_self
)

__all__ = [
    "RoleLevel", "RequesterContext",
    "is_admin_or_higher", "is_super_admin", "is_owner", "is_self"
]
