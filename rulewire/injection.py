"""
Service-provider bridge between validation runs and the DI container.

Validators are usually built once, but the services they need (and the
nested validators those services feed) often live in a request scope. The
bridge stores the run's service provider in the root context's side data and
lets rules resolve nested validators from it *when they are evaluated*::

    class CustomerValidator(Validator[Customer]):
        def __init__(self):
            super().__init__()
            inject_validator(self.rule_for("address"))
            inject_validator_using(
                self.rule_for("orders"),
                lambda services, ctx: services.resolve(OrderListValidator),
                "Create",
            )

    context = ValidationContext(customer)
    set_service_provider(context, request_container)
    CustomerValidator().validate_context(context)

One provider slot exists per run; nested validators share it through the
shared ``root_context_data``.
"""

import inspect
import logging
from typing import Any, Callable

from .di.core import ServiceProvider
from .factory import ValidatorFactory
from .faults import RuleDefinitionFault, ServiceProviderNotConfiguredFault
from .validation.base import Validator
from .validation.builder import RuleBuilder
from .validation.context import PropertyValidatorContext, ValidationContext
from .validation.validators import ChildValidatorAdaptor

logger = logging.getLogger("rulewire.injection")

SERVICE_PROVIDER_KEY = "_rw_service_provider"

ValidatorCallback = Callable[[ServiceProvider, ValidationContext], Validator]


def get_service_provider(context: Any) -> ServiceProvider:
    """
    Get the service provider registered for the run ``context`` belongs to.

    Accepts a root ``ValidationContext`` or a ``PropertyValidatorContext``.

    Raises:
        ServiceProviderNotConfiguredFault: If no root context is reachable,
            nothing was registered, or the stored value is not a service provider.
    """
    root = getattr(context, "root_context", None)

    if not isinstance(root, ValidationContext):
        reason = "no_root_context"
    elif SERVICE_PROVIDER_KEY not in root.root_context_data:
        reason = "missing"
    else:
        services = root.root_context_data[SERVICE_PROVIDER_KEY]
        if _is_service_provider(services):
            return services
        reason = "wrong_type"

    logger.warning("Service provider lookup failed (%s) for %s", reason, type(context).__name__)
    raise ServiceProviderNotConfiguredFault(
        reason,
        metadata={"context": type(context).__name__},
    )


def _is_service_provider(value: Any) -> bool:
    """
    Protocol check plus a look at the ``resolve`` signature.

    ``runtime_checkable`` only tests that a ``resolve`` attribute exists, which
    classes (``Container`` itself) and unrelated objects (``pathlib.Path``) also
    satisfy.
    """
    if isinstance(value, type) or not isinstance(value, ServiceProvider):
        return False
    try:
        params = inspect.signature(value.resolve).parameters
    except (TypeError, ValueError):
        return True
    if any(p.kind is inspect.Parameter.VAR_KEYWORD for p in params.values()):
        return True
    return "tag" in params and "optional" in params


def set_service_provider(context: ValidationContext, services: ServiceProvider) -> None:
    """Register ``services`` for the run owning ``context``, replacing any previous provider."""
    context.root_context_data[SERVICE_PROVIDER_KEY] = services
    logger.debug("Service provider %r registered on %r", services, context)


def inject_validator(rule_builder: RuleBuilder, *rule_sets: str) -> RuleBuilder:
    """
    Validate the property with the validator registered for its type.

    The validator is looked up through ``ValidatorFactory`` on every
    evaluation. A missing registration surfaces as the container's own
    ``ProviderNotFoundError``.

    Raises:
        RuleDefinitionFault: If the property type is unknown.
    """
    property_type = rule_builder.property_type
    if property_type is None:
        raise RuleDefinitionFault(
            rule_builder.property_name,
            "property type is unknown; pass property_type= to rule_for() "
            "or use inject_validator_using()",
        )

    def default_validator(services: ServiceProvider, context: ValidationContext) -> Validator:
        return services.resolve(ValidatorFactory).get_validator(property_type)

    return inject_validator_using(rule_builder, default_validator, *rule_sets)


def inject_validator_using(
    rule_builder: RuleBuilder,
    callback: ValidatorCallback,
    *rule_sets: str,
) -> RuleBuilder:
    """
    Validate the property with the validator ``callback(services, parent_context)`` returns.

    ``callback`` runs once per evaluation of the property with the run's
    service provider and the root context of the object owning the property.
    ``rule_sets`` restricts which rules of the returned validator execute.
    """
    property_name = rule_builder.property_name

    def provide(context: PropertyValidatorContext) -> Validator:
        parent = context.parent_context
        services = get_service_provider(parent)
        validator = callback(services, parent)
        logger.debug("Injected %s for '%s'", type(validator).__name__, property_name)
        return validator

    adaptor = ChildValidatorAdaptor(
        provide,
        rule_builder.property_type,
        rule_sets=rule_builder.split_rule_sets(rule_sets),
    )
    return rule_builder.set_validator(adaptor)
