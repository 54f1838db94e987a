"""Admin roles and the capability lookup table."""

from enum import Enum as PyEnum


class Role(str, PyEnum):
    """
    Effective administrative role of a principal.

    ADMIN, MANAGER and EDITOR are stored per admin user and always bound to
    one tenant. SUPER_ADMIN is derived from the orthogonal is_super_admin
    flag and grants cross-tenant capability, but tenant-scoped actions still
    require an explicitly selected tenant context.
    """

    ADMIN = "admin"
    MANAGER = "manager"
    EDITOR = "editor"
    SUPER_ADMIN = "super_admin"


class Capability(str, PyEnum):
    MANAGE_USERS = "manage_users"
    MANAGE_SETTINGS = "manage_settings"
    MANAGE_MENU = "manage_menu"
    MANAGE_MODIFIERS = "manage_modifiers"
    MANAGE_PROMOTIONS = "manage_promotions"
    MANAGE_BILLING = "manage_billing"
    MANAGE_TENANTS = "manage_tenants"


ROLE_CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.SUPER_ADMIN: frozenset(Capability),
    Role.ADMIN: frozenset(
        {
            Capability.MANAGE_USERS,
            Capability.MANAGE_SETTINGS,
            Capability.MANAGE_MENU,
            Capability.MANAGE_MODIFIERS,
            Capability.MANAGE_PROMOTIONS,
            Capability.MANAGE_BILLING,
        }
    ),
    Role.MANAGER: frozenset(
        {
            Capability.MANAGE_SETTINGS,
            Capability.MANAGE_MENU,
            Capability.MANAGE_MODIFIERS,
            Capability.MANAGE_PROMOTIONS,
        }
    ),
    Role.EDITOR: frozenset({Capability.MANAGE_MENU, Capability.MANAGE_PROMOTIONS}),
}


def has_capability(role: Role | None, capability: Capability) -> bool:
    if role is None:
        return False
    return capability in ROLE_CAPABILITIES[role]
