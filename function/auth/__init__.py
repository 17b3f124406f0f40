# ============================================================================
# FUNCTION APP AUTH
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Auth - Exports
# PURPOSE: Token validation, caller identity and request guards
# CREATED: 16 OCT 2026
# ============================================================================

from function.auth.identity import AuthenticatedUser
from function.auth.jwt_validation import JwtValidator, get_jwt_validator, reset_jwt_validator
from function.auth.guard import (
    authenticate,
    authenticate_admin,
    authenticate_with_profile,
    ensure_user_profile,
    require_role,
)

__all__ = [
    "AuthenticatedUser",
    "JwtValidator",
    "get_jwt_validator",
    "reset_jwt_validator",
    "authenticate",
    "authenticate_admin",
    "authenticate_with_profile",
    "ensure_user_profile",
    "require_role",
]
