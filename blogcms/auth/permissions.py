"""Fixed roles and the permissions each one grants."""

from enum import StrEnum


class Permission(StrEnum):
    """Granular dashboard permissions."""

    # Posts
    CREATE_POST = "create_post"
    EDIT_POST = "edit_post"
    EDIT_OWN_POST = "edit_own_post"
    DELETE_POST = "delete_post"
    DELETE_OWN_POST = "delete_own_post"
    PUBLISH_POST = "publish_post"
    VIEW_DRAFT_POST = "view_draft_post"

    # Categories
    CREATE_CATEGORY = "create_category"
    EDIT_CATEGORY = "edit_category"
    DELETE_CATEGORY = "delete_category"

    # Users
    VIEW_USERS = "view_users"
    CREATE_USER = "create_user"
    EDIT_USER = "edit_user"
    DELETE_USER = "delete_user"
    ASSIGN_ROLES = "assign_roles"

    # Site
    MANAGE_SETTINGS = "manage_settings"
    SUBMIT_INDEXING = "submit_indexing"


class Role(StrEnum):
    ADMIN = "admin"
    EDITOR = "editor"
    AUTHOR = "author"
    USER = "user"


ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.ADMIN: frozenset(Permission),
    Role.EDITOR: frozenset(
        {
            Permission.CREATE_POST,
            Permission.EDIT_POST,
            Permission.DELETE_POST,
            Permission.PUBLISH_POST,
            Permission.VIEW_DRAFT_POST,
            Permission.CREATE_CATEGORY,
            Permission.EDIT_CATEGORY,
        },
    ),
    Role.AUTHOR: frozenset(
        {
            Permission.CREATE_POST,
            Permission.EDIT_OWN_POST,
            Permission.DELETE_OWN_POST,
            Permission.VIEW_DRAFT_POST,
        },
    ),
    Role.USER: frozenset(),
}


def permissions_for(role: str) -> frozenset[Permission]:
    """Permissions granted to a role name; unknown roles get none."""
    try:
        return ROLE_PERMISSIONS[Role(role)]
    except ValueError:
        return frozenset()


def has_permission(role: str, permission: Permission) -> bool:
    """
    Check if a role grants a permission.

    Args:
        role: Role name stored on the user.
        permission: Permission to check.

    Returns:
        bool: True if the role grants the permission.
    """
    return permission in permissions_for(role)
