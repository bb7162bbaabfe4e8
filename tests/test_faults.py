"""
Faults System (faults/)

Tests Fault, FaultDomain, Severity and the domain faults.
"""

import pytest

from rulewire.faults.core import DOMAIN_DEFAULTS, Fault, FaultDomain, Severity
from rulewire.faults import (
    ConfigInvalidFault,
    RuleDefinitionFault,
    ServiceProviderNotConfiguredFault,
    ValidationFault,
)


# ============================================================================
# Severity
# ============================================================================

class TestSeverity:

    def test_values(self):
        assert Severity.INFO == "info"
        assert Severity.WARN == "warn"
        assert Severity.ERROR == "error"
        assert Severity.FATAL == "fatal"


# ============================================================================
# FaultDomain
# ============================================================================

class TestFaultDomain:

    def test_standard_domains(self):
        assert FaultDomain.CONFIG.name == "config"
        assert FaultDomain.VALIDATION.name == "validation"

    def test_module_domain(self):
        domain = FaultDomain("billing", "Billing rules")
        assert domain.name == "billing"
        assert domain == "billing"
        assert domain == FaultDomain("billing")
        assert hash(domain) == hash(FaultDomain("billing"))

    def test_defaults_table(self):
        assert DOMAIN_DEFAULTS[FaultDomain.CONFIG]["severity"] == Severity.FATAL
        assert DOMAIN_DEFAULTS[FaultDomain.VALIDATION]["severity"] == Severity.WARN


# ============================================================================
# Fault
# ============================================================================

class TestFault:

    def test_basic(self):
        fault = Fault(code="X", message="broken", domain=FaultDomain("billing"))
        assert str(fault) == "[X] broken"
        assert fault.severity == Severity.ERROR
        assert fault.retryable is False
        assert fault.metadata == {}

    def test_standard_domain_defaults(self):
        fault = Fault(code="X", message="m", domain=FaultDomain.VALIDATION)
        assert fault.severity == Severity.WARN

    def test_missing_fields(self):
        with pytest.raises(TypeError):
            Fault(code="X")

    def test_class_attribute_fallback(self):
        class TenantMissingFault(Fault):
            code = "TENANT_MISSING"
            message = "No tenant in validation context"
            domain = FaultDomain.CONFIG

        fault = TenantMissingFault()
        assert fault.code == "TENANT_MISSING"
        assert fault.severity == Severity.FATAL

    def test_to_dict(self):
        fault = Fault(code="X", message="m", domain=FaultDomain.CONFIG, metadata={"k": 1})
        assert fault.to_dict() == {
            "code": "X",
            "message": "m",
            "domain": "config",
            "severity": "fatal",
            "retryable": False,
            "public": False,
            "metadata": {"k": 1},
        }


# ============================================================================
# Domain faults
# ============================================================================

class TestDomainFaults:

    def test_config_invalid(self):
        fault = ConfigInvalidFault("cascade_mode", "bad value")
        assert fault.code == "CONFIG_INVALID"
        assert "cascade_mode" in fault.message
        assert fault.metadata == {"key": "cascade_mode", "reason": "bad value"}

    def test_service_provider_not_configured(self):
        fault = ServiceProviderNotConfiguredFault("wrong_type", metadata={"context": "ValidationContext"})
        assert fault.code == "SERVICE_PROVIDER_NOT_CONFIGURED"
        assert fault.severity == Severity.FATAL
        assert fault.metadata == {"reason": "wrong_type", "context": "ValidationContext"}
        assert "set_service_provider()" in fault.message

    def test_rule_definition(self):
        fault = RuleDefinitionFault("address", "property type is unknown")
        assert fault.domain == FaultDomain.VALIDATION
        assert fault.severity == Severity.ERROR
        assert fault.metadata["property"] == "address"

    def test_validation_fault(self):
        fault = ValidationFault({"street": ["required"]}, metadata={"validator": "AddressValidator"})
        assert fault.public is True
        assert fault.errors == {"street": ["required"]}
        data = fault.to_dict()
        assert data["errors"] == {"street": ["required"]}
        assert data["metadata"]["validator"] == "AddressValidator"
