# ============================================================================
# STARTUP VALIDATION
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Function app - Startup validation
# PURPOSE: Validate environment before registering blueprints
# CREATED: 17 OCT 2026
# ============================================================================
"""
Startup Validation

Validates environment and dependencies before registering blueprints:
fail fast, log clearly, degrade gracefully.

Checks:
    env_vars      Cosmos and token validation settings present (required)
    cosmos        Database reachable; containers ensured when
                  COSMOSDB_ENSURE_CONTAINERS=true (required)
    integrations  Which optional integrations are configured (informational)

If validation fails, only /livez and /readyz endpoints are available.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from function.config import get_config
from infrastructure.container_initializer import ContainerInitializer
from infrastructure.cosmos import get_database

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of a startup validation check."""

    name: str
    passed: bool
    error_type: Optional[str] = None
    error_message: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


def _not_run(name: str) -> ValidationResult:
    return ValidationResult(name, False, "NotRun", "Validation not yet run")


@dataclass
class StartupState:
    """Track all startup validation checks."""

    env_vars: ValidationResult = field(default_factory=lambda: _not_run("env_vars"))
    cosmos: ValidationResult = field(default_factory=lambda: _not_run("cosmos"))
    integrations: ValidationResult = field(default_factory=lambda: _not_run("integrations"))

    def required_checks(self) -> List[ValidationResult]:
        return [self.env_vars, self.cosmos]

    @property
    def all_passed(self) -> bool:
        """Check if all required validations passed."""
        return all(c.passed for c in self.required_checks())

    def failed_checks(self) -> List[ValidationResult]:
        return [c for c in self.required_checks() if not c.passed]

    def failed_check_names(self) -> List[str]:
        return [c.name for c in self.failed_checks()]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        checks = {}
        for check in (self.env_vars, self.cosmos, self.integrations):
            checks[check.name] = {
                "passed": check.passed,
                "error": check.error_message if not check.passed else None,
            }
            if check.details:
                checks[check.name]["details"] = check.details
        return {"all_passed": self.all_passed, "checks": checks}


# Global singleton
STARTUP_STATE = StartupState()


def validate_startup() -> bool:
    """
    Run all startup validation checks.

    Returns True if all required checks pass.
    Updates global STARTUP_STATE with results.
    """
    logger.info("Starting validation checks...")

    # 1. Environment Variables
    STARTUP_STATE.env_vars = _validate_env_vars()
    if STARTUP_STATE.env_vars.passed:
        logger.info("  [PASS] Environment variables")
    else:
        logger.error(f"  [FAIL] Environment variables: {STARTUP_STATE.env_vars.error_message}")

    # 2. Cosmos DB (only if env vars passed)
    if STARTUP_STATE.env_vars.passed:
        STARTUP_STATE.cosmos = _validate_cosmos()
        if STARTUP_STATE.cosmos.passed:
            logger.info("  [PASS] Cosmos DB")
        else:
            logger.error(f"  [FAIL] Cosmos DB: {STARTUP_STATE.cosmos.error_message}")
    else:
        STARTUP_STATE.cosmos = ValidationResult(
            name="cosmos",
            passed=False,
            error_type="Skipped",
            error_message="Skipped due to env_vars failure",
        )

    # 3. Optional integrations (informational)
    STARTUP_STATE.integrations = _validate_integrations()
    missing = [k for k, v in STARTUP_STATE.integrations.details.items() if not v]
    if missing:
        logger.warning(f"  [INFO] Integrations not configured: {missing}")
    else:
        logger.info("  [INFO] All integrations configured")

    # Summary
    if STARTUP_STATE.all_passed:
        logger.info("All validation checks PASSED")
    else:
        logger.error(f"Validation FAILED: {STARTUP_STATE.failed_check_names()}")

    return STARTUP_STATE.all_passed


def _validate_env_vars() -> ValidationResult:
    """Validate required environment variables."""
    config = get_config()

    if not config.has_cosmos_config:
        return ValidationResult(
            name="env_vars",
            passed=False,
            error_type="MissingEnvVar",
            error_message=(
                "COSMOSDB_CONNECTION_STRING, or COSMOSDB_ENDPOINT_URI with "
                "COSMOSDB_PRIMARY_KEY or USE_MANAGED_IDENTITY=true required"
            ),
        )

    if not config.has_auth_config:
        return ValidationResult(
            name="env_vars",
            passed=False,
            error_type="MissingEnvVar",
            error_message="AAD_TENANT_ID or OPEN_ID_CONNECT_METADATA_URL, and AAD_AUDIENCE or AAD_CLIENT_ID required",
        )

    return ValidationResult(name="env_vars", passed=True)


def _validate_cosmos() -> ValidationResult:
    """Validate the database is reachable, provisioning containers when enabled."""
    config = get_config()
    try:
        if config.cosmos_ensure_containers:
            result = ContainerInitializer().initialize_all()
            if not result.success:
                return ValidationResult(
                    name="cosmos",
                    passed=False,
                    error_type="ContainerInitializationFailed",
                    error_message="; ".join(result.errors),
                )
        else:
            get_database().read()
        return ValidationResult(name="cosmos", passed=True)
    except Exception as e:
        return ValidationResult(
            name="cosmos",
            passed=False,
            error_type=type(e).__name__,
            error_message=str(e),
        )


def _validate_integrations() -> ValidationResult:
    """
    List configured integrations.

    Never fails: an unconfigured integration only fails the routes using it.
    """
    return ValidationResult(name="integrations", passed=True, details=get_config().integration_summary())


__all__ = ["STARTUP_STATE", "validate_startup", "ValidationResult", "StartupState"]
