# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission


# =========================================================
# ROLE CONSTANTS
# =========================================================
ROLE_ADMIN = "admin"
ROLE_ADVISOR = "advisor"
ROLE_CUSTOMER = "customer"

# Staff answer live chats; customers pay for them.
STAFF_ROLES = {
    ROLE_ADMIN,
    ROLE_ADVISOR,
}


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views should protect capabilities, not raw roles.
CAP_CHAT_REQUEST = "chat.request"
CAP_CHAT_ACCEPT = "chat.accept"
CAP_CHAT_END = "chat.end"
CAP_CHAT_MONITOR = "chat.monitor"

CAP_WALLET_TOPUP = "wallet.topup"
CAP_WALLET_GRANT = "wallet.grant"

CAP_CATALOG_MANAGE = "catalog.manage"
CAP_ORDERS_MANAGE = "orders.manage"
CAP_CONTENT_MANAGE = "content.manage"

ALL_CAPABILITIES = {
    CAP_CHAT_REQUEST,
    CAP_CHAT_ACCEPT,
    CAP_CHAT_END,
    CAP_CHAT_MONITOR,
    CAP_WALLET_TOPUP,
    CAP_WALLET_GRANT,
    CAP_CATALOG_MANAGE,
    CAP_ORDERS_MANAGE,
    CAP_CONTENT_MANAGE,
}


# =========================================================
# ROLE → CAPABILITY MAP (DEFAULT)
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_ADVISOR: {
        CAP_CHAT_ACCEPT,
        CAP_CHAT_MONITOR,
        # ending a paid session early is an admin decision
    },
    ROLE_CUSTOMER: {
        CAP_CHAT_REQUEST,
        CAP_WALLET_TOPUP,
    },
}


def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def is_staff_user(user) -> bool:
    return get_user_role(user) in STAFF_ROLES


def capabilities_for(user) -> set[str]:
    return set(ROLE_CAPABILITIES.get(get_user_role(user), set()))


def user_has_capability(user, capability: str) -> bool:
    if not user or not getattr(user, "is_authenticated", False):
        return False
    return capability in capabilities_for(user)


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        view.required_capability = CAP_CHAT_ACCEPT
    """

    def has_permission(self, request, view):
        required = getattr(view, "required_capability", None)
        if not required:
            # If not set, deny-by-default to avoid accidental open endpoints
            return False

        return user_has_capability(request.user, required)


class HasAnyCapability(BasePermission):
    """
    Require ANY capability from a set.

    Usage:
        view.required_any_capabilities = {CAP_CHAT_ACCEPT, CAP_CHAT_MONITOR}
    """

    def has_permission(self, request, view):
        required = getattr(view, "required_any_capabilities", None)
        if not required:
            return False

        return any(user_has_capability(request.user, cap) for cap in set(required))


# =========================================================
# Role Permissions
# =========================================================
class BaseRolePermission(BasePermission):
    """
    Coarse role gate. Prefer capabilities; subclasses set allowed_roles.
    """

    allowed_roles: set[str] = set()

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return get_user_role(user) in self.allowed_roles


class IsAdmin(BaseRolePermission):
    allowed_roles = {ROLE_ADMIN}


class IsStaff(BaseRolePermission):
    allowed_roles = STAFF_ROLES


class IsCustomer(BaseRolePermission):
    allowed_roles = {ROLE_CUSTOMER}
