"""
rulewire - DI-aware declarative validation.

Validators declare rules once; nested validators and the services they need
are resolved from the current run's DI scope at validation time.

Public API
----------
``get_service_provider`` / ``set_service_provider``
    Read and write the service provider of a validation run.

``inject_validator`` / ``inject_validator_using``
    Attach a nested validator resolved at evaluation time.

``add_validation`` / ``validation_scope`` / ``validate``
    Host-side wiring: register validators, open a request scope, validate.
"""

__version__ = "0.1.0"

from .config import ConfigLoader, ValidationConfig
from .di import Container, ServiceProvider
from .factory import ValidatorFactory
from .faults import (
    ConfigInvalidFault,
    Fault,
    RuleDefinitionFault,
    ServiceProviderNotConfiguredFault,
    ValidationFault,
)
from .injection import (
    SERVICE_PROVIDER_KEY,
    get_service_provider,
    inject_validator,
    inject_validator_using,
    set_service_provider,
)
from .integration import add_validation, add_validator, validate, validation_scope
from .validation import (
    PropertyValidatorContext,
    RuleBuilder,
    ValidationContext,
    ValidationFailure,
    ValidationResult,
    Validator,
)

__all__ = [
    "__version__",
    # Bridge
    "SERVICE_PROVIDER_KEY",
    "get_service_provider",
    "set_service_provider",
    "inject_validator",
    "inject_validator_using",
    # Integration
    "add_validation",
    "add_validator",
    "validation_scope",
    "validate",
    "ValidatorFactory",
    # Validation
    "Validator",
    "RuleBuilder",
    "ValidationContext",
    "PropertyValidatorContext",
    "ValidationResult",
    "ValidationFailure",
    # DI
    "Container",
    "ServiceProvider",
    # Config
    "ValidationConfig",
    "ConfigLoader",
    # Faults
    "Fault",
    "ConfigInvalidFault",
    "ServiceProviderNotConfiguredFault",
    "RuleDefinitionFault",
    "ValidationFault",
]
