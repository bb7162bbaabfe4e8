"""
Shared test fixtures and domain stubs for the rulewire test suite.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import pytest

from rulewire.di import Container
from rulewire.integration import add_validation, validation_scope
from rulewire.validation import Validator


# ============================================================================
# Domain stubs
# ============================================================================

@dataclass
class Address:
    street: str = ""
    postcode: str = ""


@dataclass
class Customer:
    name: str = ""
    address: Optional[Address] = None


@dataclass
class Invoice:
    number: str = ""
    customer: Optional[Customer] = None


@dataclass
class OrderLine:
    sku: str = ""
    quantity: int = 1


@dataclass
class Order:
    reference: str = ""
    line: Optional[OrderLine] = None
    tags: List[str] = field(default_factory=list)


class PostcodeDirectory:
    """Simulates a lookup service only available through DI."""

    def __init__(self):
        self.known = {"SW1A 1AA", "EC1A 1BB"}
        self.lookups = 0

    def exists(self, postcode: str) -> bool:
        self.lookups += 1
        return postcode in self.known


# ============================================================================
# Validators
# ============================================================================

class AddressValidator(Validator[Address]):
    def __init__(self, directory: PostcodeDirectory):
        super().__init__()
        self.directory = directory
        self.rule_for("street").not_empty()
        self.rule_for("postcode").must(directory.exists, "'{property_name}' is not a known postcode.")


class CustomerValidator(Validator[Customer]):
    def __init__(self):
        super().__init__()
        self.rule_for("name").not_empty()
        self.rule_for("address").inject_validator()


class InvoiceValidator(Validator[Invoice]):
    def __init__(self):
        super().__init__()
        self.rule_for("number").not_empty()
        self.rule_for("customer").not_none().inject_validator()


class OrderLineValidator(Validator[OrderLine]):
    """One rule set that always fails, one that always passes."""

    def __init__(self):
        super().__init__()
        with self.rule_set("Create"):
            self.rule_for("sku").must(lambda value: False, "Create rule failed")
        with self.rule_set("Update"):
            self.rule_for("sku").must(lambda value: True, "Update rule failed")


def valid_customer() -> Customer:
    return Customer(name="Ada", address=Address(street="1 Main St", postcode="SW1A 1AA"))


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def container() -> Container:
    """App container with every test validator registered."""
    app = Container(scope="app")
    app.bind(PostcodeDirectory, PostcodeDirectory, scope="singleton")
    add_validation(app, AddressValidator, CustomerValidator, InvoiceValidator, OrderLineValidator)
    return app


@pytest.fixture
def services(container):
    """Request scope for one validation run."""
    with validation_scope(container) as request_container:
        yield request_container
