"""Auth module exports."""
from commons_youth.auth.jwt import (
    verify_password,
    hash_password,
    create_access_token,
    create_refresh_token,
    verify_token,
    get_current_user,
    get_optional_user,
    get_current_active_admin,
    is_admin_role,
    can_manage,
    can_view,
    ensure_can_manage,
)

__all__ = [
    "verify_password",
    "hash_password",
    "create_access_token",
    "create_refresh_token",
    "verify_token",
    "get_current_user",
    "get_optional_user",
    "get_current_active_admin",
    "is_admin_role",
    "can_manage",
    "can_view",
    "ensure_can_manage",
]
