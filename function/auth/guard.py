# ============================================================================
# REQUEST GUARD
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Auth - Per-request authentication and authorization
# PURPOSE: Bearer header parsing, role checks and profile bootstrap
# CREATED: 16 OCT 2026
# ============================================================================
"""
Request Guard

Blueprints call these at the top of each protected function:

    user, error = authenticate(req)
    if error:
        return error
    error = require_role(user, "Admin")
    if error:
        return error

Each helper returns an HttpResponse on failure instead of raising, so the
function body stays a straight line.
"""

import logging
from typing import Optional, Tuple

import azure.functions as func

from core.contracts import UserRole
from core.errors import AuthenticationError
from core.models import UserProfile
from function.auth.identity import AuthenticatedUser
from function.auth.jwt_validation import get_jwt_validator
from function.http import error_response
from function.services.user_profile_service import UserProfileService

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def authenticate(req: func.HttpRequest) -> Tuple[Optional[AuthenticatedUser], Optional[func.HttpResponse]]:
    """
    Validate the Authorization header.

    Returns:
        (user, None) on success, (None, 401/500 response) on failure
    """
    header = req.headers.get("Authorization")
    if header is None:
        return None, error_response("Authorization header is required", 401)
    if not header.strip():
        return None, error_response("Authorization header is empty", 401)
    if not header.startswith(BEARER_PREFIX):
        return None, error_response("Authorization header must start with 'Bearer '", 401)

    token = header[len(BEARER_PREFIX):].strip()
    if not token:
        return None, error_response("Token is empty", 401)

    try:
        claims = get_jwt_validator().validate(token)
        if claims is None:
            return None, error_response("Invalid or expired token", 401)
        return AuthenticatedUser.from_claims(claims), None
    except AuthenticationError as e:
        return None, error_response(e.message, 401)
    except Exception as e:
        logger.exception(f"Authentication error: {e}")
        return None, error_response("Authentication error", 500)


def require_role(user: AuthenticatedUser, role: str = UserRole.ADMIN.value) -> Optional[func.HttpResponse]:
    """403 response unless the user holds the role."""
    if user.has_role(role):
        return None
    logger.warning(f"User {user.upn} lacks role {role}")
    return error_response(f"{role} role required", 403)


def authenticate_admin(req: func.HttpRequest) -> Tuple[Optional[AuthenticatedUser], Optional[func.HttpResponse]]:
    """authenticate() followed by require_role(Admin)."""
    user, error = authenticate(req)
    if error:
        return None, error
    error = require_role(user, UserRole.ADMIN.value)
    if error:
        return None, error
    return user, None


def ensure_user_profile(user: AuthenticatedUser) -> Tuple[Optional[UserProfile], Optional[func.HttpResponse]]:
    """Load or create the caller's profile; 401 when that fails."""
    try:
        return UserProfileService().ensure_profile(user), None
    except Exception as e:
        logger.warning(f"User profile validation failed for {user.upn}: {e}")
        return None, error_response("User profile validation failed", 401)


def authenticate_with_profile(
    req: func.HttpRequest,
) -> Tuple[Optional[AuthenticatedUser], Optional[UserProfile], Optional[func.HttpResponse]]:
    """authenticate() followed by ensure_user_profile()."""
    user, error = authenticate(req)
    if error:
        return None, None, error
    profile, error = ensure_user_profile(user)
    if error:
        return None, None, error
    return user, profile, None


__all__ = [
    "authenticate",
    "authenticate_admin",
    "require_role",
    "ensure_user_profile",
    "authenticate_with_profile",
    "BEARER_PREFIX",
]
