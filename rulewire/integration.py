"""
Host integration - wiring a DI container into validation runs.

This is the layer a web framework (or any host) calls once per request:

    container = Container()
    add_validation(container, CustomerValidator, AddressValidator)

    with validation_scope(container) as services:
        result = validate(Customer, customer, services, rule_sets=["Create"])

``validate()`` builds the root context, registers the service provider on it
and runs the validator, so rules using ``inject_validator`` resolve their
nested validators from ``services``.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from .config import DEFAULT_CONFIG, ValidationConfig
from .di.core import Container, ServiceProvider
from .di.providers import ValueProvider
from .factory import ValidatorFactory
from .faults import RuleDefinitionFault, ValidationFault
from .injection import set_service_provider
from .validation.base import Validator
from .validation.context import ValidationContext
from .validation.results import ValidationResult
from .validation.selectors import RuleSetSelector

logger = logging.getLogger("rulewire.integration")


def add_validation(
    container: Container,
    *validator_classes: type,
    config: Optional[ValidationConfig] = None,
    scope: str = "transient",
) -> Container:
    """
    Register validation services on ``container``.

    Registers the ``ValidationConfig`` (singleton), ``ValidatorFactory`` and
    every validator class, both under ``Validator[Model]`` and under the class
    itself.

    Raises:
        RuleDefinitionFault: If a validator class declares no model type.
    """
    config = config or DEFAULT_CONFIG

    if not container.is_registered(ValidationConfig):
        container.register(ValueProvider(value=config, token=ValidationConfig, name="validation_config"))
    if not container.is_registered(ValidatorFactory):
        container.bind(ValidatorFactory, ValidatorFactory, scope="transient")

    for validator_cls in validator_classes:
        add_validator(container, validator_cls, scope=scope)

    return container


def add_validator(container: Container, validator_cls: type, *, scope: str = "transient") -> None:
    """Register one validator class under ``Validator[Model]`` and its own type."""
    model = getattr(validator_cls, "model", None)
    if model is None:
        raise RuleDefinitionFault(
            validator_cls.__name__,
            "validator has no model type; subclass Validator[Model] or set model = Model",
        )

    if container.is_registered(validator_cls):
        return

    container.bind(Validator[model], validator_cls, scope=scope)
    container.bind(validator_cls, validator_cls, scope=scope)
    logger.debug("Registered %s for %s (scope=%s)", validator_cls.__name__, model.__name__, scope)


@contextmanager
def validation_scope(container: Container) -> Iterator[Container]:
    """Yield a request-scoped child of ``container`` and shut it down afterwards."""
    request_container = container.create_request_scope()
    try:
        yield request_container
    finally:
        request_container.shutdown()


def validate(
    validator: Any,
    instance: Any,
    services: ServiceProvider,
    *,
    rule_sets: Any = None,
    root_data: Optional[dict[str, Any]] = None,
    raise_fault: Optional[bool] = None,
) -> ValidationResult:
    """
    Validate ``instance`` with ``services`` registered for the run.

    Args:
        validator: A ``Validator`` instance, or a model type whose validator
            is resolved through ``ValidatorFactory``.
        instance: Object to validate.
        services: Service provider for this run (usually a request scope).
        rule_sets: Rule-set names; empty runs every rule.
        root_data: Extra side data for the run.
        raise_fault: Raise ``ValidationFault`` when invalid. Defaults to
            ``ValidationConfig.raise_on_failure``.

    Raises:
        ValidationFault: When invalid and raising is enabled.
        ProviderNotFoundError: If ``validator`` is a type with no registered validator.
    """
    if not isinstance(validator, Validator):
        validator = services.resolve(ValidatorFactory).get_validator(validator)

    config = services.resolve(ValidationConfig, optional=True) or validator.config
    selector = RuleSetSelector(config.split_rule_sets(rule_sets))

    context = ValidationContext(instance, selector=selector, root_context_data=dict(root_data or {}))
    set_service_provider(context, services)

    result = validator.validate_context(context)
    logger.debug(
        "%s validated %s: %d failure(s)",
        type(validator).__name__, type(instance).__name__, len(result.failures),
    )

    should_raise = config.raise_on_failure if raise_fault is None else raise_fault
    if should_raise and not result.is_valid:
        raise ValidationFault(result.errors, metadata={"validator": type(validator).__name__})
    return result
