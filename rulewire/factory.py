"""
Validator lookup by model type.
"""

from typing import Any, Optional

from .di.core import ServiceProvider
from .validation.base import Validator


class ValidatorFactory:
    """
    Resolves the validator registered for a model type.

    Validators are registered under ``Validator[Model]``
    (see ``rulewire.integration.add_validation``); this class only turns a
    model type into that token and asks the service provider for it.
    """

    __slots__ = ("_services",)

    def __init__(self, services: ServiceProvider):
        self._services = services

    def get_validator(self, model_type: Any) -> Validator:
        """
        Raises:
            ProviderNotFoundError: If no validator is registered for ``model_type``
        """
        return self._services.resolve(Validator[model_type])

    def get_validator_or_none(self, model_type: Any) -> Optional[Validator]:
        return self._services.resolve(Validator[model_type], optional=True)
