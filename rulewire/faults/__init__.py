"""
rulewire faults - typed fault signals.

Every error the library raises on purpose is a ``Fault``: a structured
exception with a stable code, a domain, a severity and metadata.

Core exports:
- Fault: Base fault class
- FaultDomain: Domain taxonomy
- Severity: Severity levels
- Domain faults for configuration and validation
"""

from .core import (
    Fault,
    FaultDomain,
    Severity,
)

from .domains import (
    ConfigFault,
    ConfigInvalidFault,
    ServiceProviderNotConfiguredFault,
    RuleDefinitionFault,
    ValidationFault,
)

__all__ = [
    # Core types
    "Fault",
    "FaultDomain",
    "Severity",

    # Domain faults
    "ConfigFault",
    "ConfigInvalidFault",
    "ServiceProviderNotConfiguredFault",
    "RuleDefinitionFault",
    "ValidationFault",
]
