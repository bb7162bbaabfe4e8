"""
rulewire faults - Domain-specific fault types.

Provides concrete fault classes for each domain:
- CONFIG faults (settings and integration wiring)
- VALIDATION faults (rule definitions and validation outcomes)
"""

from typing import Any, Dict, List, Optional

from .core import Fault, FaultDomain, Severity


# ============================================================================
# CONFIG Faults
# ============================================================================

class ConfigFault(Fault):
    """Base class for configuration faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.FATAL,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.CONFIG,
            severity=severity,
            retryable=False,
            public=False,
            metadata=metadata,
        )


class ConfigInvalidFault(ConfigFault):
    """Configuration value is invalid."""

    def __init__(self, key: str, reason: str, **kwargs):
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Configuration key '{key}' is invalid: {reason}",
            metadata={"key": key, "reason": reason, **kwargs.get("metadata", {})},
        )


class ServiceProviderNotConfiguredFault(ConfigFault):
    """
    No service provider is reachable from a validation context.

    Raised when the integration layer never registered a provider for the
    current validation run, or when the registered value is not a provider.
    """

    def __init__(self, reason: str = "missing", **kwargs):
        super().__init__(
            code="SERVICE_PROVIDER_NOT_CONFIGURED",
            message=(
                "The service provider has not been configured to work with rulewire. "
                "inject_validator() and get_service_provider() are only supported when "
                "validation runs through rulewire.integration.validate() or after "
                "set_service_provider() was called on the root context."
            ),
            metadata={"reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# VALIDATION Faults
# ============================================================================

class RuleDefinitionFault(Fault):
    """A rule was declared in a way that can never be evaluated."""

    def __init__(self, property_name: str, reason: str, **kwargs):
        super().__init__(
            code="RULE_DEFINITION_INVALID",
            message=f"Rule for '{property_name}' is invalid: {reason}",
            domain=FaultDomain.VALIDATION,
            severity=Severity.ERROR,
            retryable=False,
            public=False,
            metadata={"property": property_name, "reason": reason, **kwargs.get("metadata", {})},
        )


class ValidationFault(Fault):
    """
    Raised when validation of an instance fails.

    Contains structured ``errors`` dict mapping property paths to lists
    of error messages.

    Attributes:
        errors: ``{property_path: [messages]}``
    """

    def __init__(
        self,
        errors: Dict[str, List[str]],
        *,
        message: str = "Validation failed",
        metadata: Optional[Dict[str, Any]] = None,
    ):
        self.errors = errors
        meta = {"errors": errors}
        if metadata:
            meta.update(metadata)
        super().__init__(
            code="VALIDATION_FAILED",
            message=message,
            domain=FaultDomain.VALIDATION,
            severity=Severity.WARN,
            retryable=False,
            public=True,
            metadata=meta,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Override to include structured errors in output."""
        base = super().to_dict()
        base["errors"] = self.errors
        return base
