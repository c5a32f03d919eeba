from blogcms.auth.permissions import (
    ROLE_PERMISSIONS,
    Permission,
    Role,
    has_permission,
    permissions_for,
)

__all__ = ["ROLE_PERMISSIONS", "Permission", "Role", "has_permission", "permissions_for"]
