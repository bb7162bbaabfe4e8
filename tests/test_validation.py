"""
Validation engine: rules, components, rule sets, contexts and results.
"""

import pytest

from rulewire.config import DEFAULT_CONFIG, ValidationConfig
from rulewire.faults import RuleDefinitionFault, ValidationFault
from rulewire.validation import (
    ChildValidatorAdaptor,
    LengthValidator,
    PropertyValidator,
    RuleSetSelector,
    ValidationContext,
    ValidationFailure,
    ValidationResult,
    Validator,
)

from tests.conftest import Address, Customer, Order, OrderLine, OrderLineValidator


class StreetValidator(Validator[Address]):
    def __init__(self, config=None):
        super().__init__(config)
        self.rule_for("street").not_empty().max_length(10)


# ============================================================================
# Rule declaration
# ============================================================================

class TestRuleDeclaration:

    def test_model_from_generic_parameter(self):
        assert StreetValidator.model is Address

    def test_model_from_class_attribute(self):
        class PlainValidator(Validator):
            model = Customer

        assert PlainValidator.model is Customer

    def test_subclass_inherits_model(self):
        class StrictLineValidator(OrderLineValidator):
            pass

        assert StrictLineValidator.model is OrderLine

    def test_property_type_inferred_from_hints(self):
        class CustomerRules(Validator[Customer]):
            pass

        builder = CustomerRules().rule_for("address")
        assert builder.property_type is Address
        assert builder.property_name == "address"

    def test_explicit_property_type_wins(self):
        class CustomerRules(Validator[Customer]):
            pass

        assert CustomerRules().rule_for("address", dict).property_type is dict

    def test_lambda_requires_name(self):
        class CustomerRules(Validator[Customer]):
            pass

        with pytest.raises(RuleDefinitionFault) as exc:
            CustomerRules().rule_for(lambda c: c.name)
        assert exc.value.code == "RULE_DEFINITION_INVALID"

    def test_named_lambda(self):
        class CustomerRules(Validator[Customer]):
            def __init__(self):
                super().__init__()
                self.rule_for(lambda c: c.name.upper(), name="shout").must(lambda v: v == "ADA")

        result = CustomerRules().validate(Customer(name="bob"))
        assert list(result.errors) == ["shout"]

    def test_rejects_non_callable_expression(self):
        with pytest.raises(RuleDefinitionFault):
            StreetValidator().rule_for(42)

    def test_empty_rule_set_block_rejected(self):
        with pytest.raises(RuleDefinitionFault):
            with StreetValidator().rule_set():
                pass

    def test_rules_are_exposed_read_only(self):
        validator = StreetValidator()
        assert len(validator.rules) == 1
        assert isinstance(validator.rules, tuple)


# ============================================================================
# Components
# ============================================================================

class TestComponents:

    def test_not_empty(self):
        result = StreetValidator().validate(Address(street="   "))
        assert result.errors == {"street": ["'street' must not be empty."]}

    def test_max_length(self):
        result = StreetValidator().validate(Address(street="a" * 11))
        assert result.errors == {"street": ["'street' must be 10 characters or fewer."]}

    def test_length_range(self):
        class PostcodeValidator(Validator[Address]):
            def __init__(self):
                super().__init__()
                self.rule_for("postcode").length(5, 8)

        assert PostcodeValidator().validate(Address(postcode="SW1A 1AA")).is_valid
        result = PostcodeValidator().validate(Address(postcode="SW1"))
        assert result.errors == {"postcode": ["'postcode' must be between 5 and 8 characters."]}

    def test_min_length(self):
        class PostcodeValidator(Validator[Address]):
            def __init__(self):
                super().__init__()
                self.rule_for("postcode").min_length(3)

        result = PostcodeValidator().validate(Address(postcode="ab"))
        assert result.errors == {"postcode": ["'postcode' must be at least 3 characters."]}

    def test_length_rejects_inverted_range(self):
        with pytest.raises(ValueError):
            LengthValidator(5, 2)

    def test_not_none(self):
        class CustomerRules(Validator[Customer]):
            def __init__(self):
                super().__init__()
                self.rule_for("address").not_none()

        result = CustomerRules().validate(Customer())
        assert result.failures[0].property_name == "address"
        assert result.failures[0].error_code == "NotNoneValidator"

    def test_must_with_instance(self):
        class OrderRules(Validator[Order]):
            def __init__(self):
                super().__init__()
                self.rule_for("tags").must(
                    lambda order, tags: bool(tags) or not order.reference,
                    "'{property_name}' are required for referenced orders.",
                    pass_instance=True,
                )

        assert OrderRules().validate(Order()).is_valid
        result = OrderRules().validate(Order(reference="R-1"))
        assert result.errors == {"tags": ["'tags' are required for referenced orders."]}

    def test_message_code_and_display_name_overrides(self):
        class CustomerRules(Validator[Customer]):
            def __init__(self):
                super().__init__()
                (
                    self.rule_for("name")
                    .not_empty()
                    .with_message("{property_name} is required")
                    .with_error_code("name_required")
                    .with_name("Full name")
                )

        failure = CustomerRules().validate(Customer()).failures[0]
        assert failure.error_message == "Full name is required"
        assert failure.error_code == "name_required"
        assert failure.property_name == "name"
        assert failure.attempted_value == ""

    def test_with_message_before_component_rejected(self):
        with pytest.raises(IndexError):
            StreetValidator().rule_for("postcode").with_message("nope")

    def test_mapping_instances(self):
        class MappingValidator(Validator):
            def __init__(self):
                super().__init__()
                self.rule_for("street").not_empty()

        result = MappingValidator().validate({"street": ""})
        assert result.errors == {"street": ["'street' must not be empty."]}


# ============================================================================
# Cascade
# ============================================================================

class TestCascade:

    def test_continue_reports_every_failure(self):
        result = StreetValidator().validate(Address(street=None))
        assert len(result.failures) == 1  # length skips None

        class TwoChecks(Validator[Address]):
            def __init__(self, config=None):
                super().__init__(config)
                self.rule_for("street").must(lambda v: False, "first").must(lambda v: False, "second")

        assert TwoChecks().validate(Address()).errors == {"street": ["first", "second"]}

    def test_stop_from_config(self):
        class TwoChecks(Validator[Address]):
            def __init__(self, config=None):
                super().__init__(config)
                self.rule_for("street").must(lambda v: False, "first").must(lambda v: False, "second")

        result = TwoChecks(ValidationConfig(cascade_mode="stop")).validate(Address())
        assert result.errors == {"street": ["first"]}

    def test_stop_per_rule(self):
        class TwoChecks(Validator[Address]):
            def __init__(self):
                super().__init__()
                self.rule_for("street").cascade("stop").must(lambda v: False, "first").must(lambda v: False, "second")

        assert TwoChecks().validate(Address()).errors == {"street": ["first"]}

    def test_unknown_cascade_mode(self):
        with pytest.raises(ValueError):
            StreetValidator().rule_for("street").cascade("sometimes")


# ============================================================================
# Rule sets
# ============================================================================

class TestRuleSets:

    def test_selector_semantics(self):
        assert RuleSetSelector().can_execute(("Create",))
        assert RuleSetSelector(["*"]).can_execute(("Create",))
        assert RuleSetSelector(["Create"]).can_execute(("Create", "Update"))
        assert not RuleSetSelector(["Create"]).can_execute(())
        assert RuleSetSelector(["default"]).can_execute(())

    def test_named_rule_set(self):
        result = OrderLineValidator().validate(OrderLine(), rule_sets=["Create"])
        assert result.errors == {"sku": ["Create rule failed"]}
        assert result.rule_sets_executed == ("Create",)

    def test_other_rule_set(self):
        assert OrderLineValidator().validate(OrderLine(), rule_sets=["Update"]).is_valid

    def test_separated_string(self):
        result = OrderLineValidator().validate(OrderLine(), rule_sets="Update, Create")
        assert not result.is_valid

    def test_default_rule_set_excludes_tagged_rules(self):
        assert OrderLineValidator().validate(OrderLine(), rule_sets="default").is_valid

    def test_empty_runs_everything(self):
        assert not OrderLineValidator().validate(OrderLine()).is_valid

    def test_custom_separator(self):
        config = ValidationConfig(rule_set_separator="|")
        assert config.split_rule_sets("Create|Update") == ("Create", "Update")
        assert config.split_rule_sets(None) == ()
        assert config.split_rule_sets(["A", " ", "B "]) == ("A", "B")

    def test_joined_names_inside_iterables(self):
        assert DEFAULT_CONFIG.split_rule_sets(["Create,Update", "Delete"]) == ("Create", "Update", "Delete")
        assert DEFAULT_CONFIG.split_rule_sets(("Create,Update",)) == ("Create", "Update")

    def test_rule_set_block_accepts_joined_names(self):
        class TaggedLineValidator(Validator[OrderLine]):
            def __init__(self):
                super().__init__()
                with self.rule_set("Create,Update"):
                    self.rule_for("sku").not_empty()

        assert TaggedLineValidator().rules[0].rule_sets == ("Create", "Update")


# ============================================================================
# Contexts
# ============================================================================

class TestContexts:

    def test_root_context_of_root_is_itself(self):
        context = ValidationContext(Address())
        assert context.root_context is context

    def test_child_shares_root_data(self):
        root = ValidationContext(Customer(), root_context_data={"tenant": "acme"})
        child = root.clone_for_child(Address(), property_name="address")
        grandchild = child.clone_for_child("x", property_name="street")

        assert child.root_context_data is root.root_context_data
        assert grandchild.property_chain == "address.street"
        assert child.selector is root.selector

    def test_root_data_visible_to_rules(self):
        seen = []

        class TenantValidator(Validator[Address]):
            def __init__(self):
                super().__init__()
                self.rule_for("street").set_validator(_Recorder(seen))

        TenantValidator().validate(Address(), root_data={"tenant": "acme"})
        assert seen == ["acme"]

    def test_wrong_instance_type(self):
        with pytest.raises(TypeError):
            StreetValidator().validate(Customer())


class _Recorder(PropertyValidator):
    def __init__(self, seen):
        super().__init__()
        self.seen = seen

    def is_valid(self, value, context):
        self.seen.append(context.root_context.root_context_data["tenant"])
        return True


# ============================================================================
# Nested validators
# ============================================================================

class TestNestedValidators:

    def test_fixed_nested_validator(self):
        class CustomerRules(Validator[Customer]):
            def __init__(self):
                super().__init__()
                self.rule_for("address").set_nested_validator(StreetValidator())

        result = CustomerRules().validate(Customer(address=Address(street="")))
        assert result.errors == {"address.street": ["'street' must not be empty."]}

    def test_nested_rule_sets(self):
        class OrderRules(Validator[Order]):
            def __init__(self):
                super().__init__()
                self.rule_for("line").set_nested_validator(OrderLineValidator(), "Update")

        assert OrderRules().validate(Order(line=OrderLine())).is_valid

    def test_nested_joined_rule_sets(self):
        class OrderRules(Validator[Order]):
            def __init__(self):
                super().__init__()
                self.rule_for("line").set_nested_validator(OrderLineValidator(), "Update,Create")

        result = OrderRules().validate(Order(line=OrderLine()))
        assert result.errors == {"line.sku": ["Create rule failed"]}

    def test_nested_validator_for_other_model_rejected(self):
        class CustomerRules(Validator[Customer]):
            def __init__(self):
                super().__init__()
                self.rule_for("address").set_nested_validator(OrderLineValidator())

        with pytest.raises(RuleDefinitionFault) as exc:
            CustomerRules().validate(Customer(address=Address()))
        assert "OrderLineValidator cannot validate instances of Address" in exc.value.message

    def test_provider_called_per_evaluation(self):
        calls = []

        def provide(context):
            calls.append(context.property_path)
            return StreetValidator()

        class CustomerRules(Validator[Customer]):
            def __init__(self):
                super().__init__()
                self.rule_for("address").set_validator(ChildValidatorAdaptor(provide, Address))

        validator = CustomerRules()
        validator.validate(Customer(address=Address(street="a")))
        validator.validate(Customer(address=None))
        validator.validate(Customer(address=Address(street="b")))
        assert calls == ["address", "address"]


# ============================================================================
# Results
# ============================================================================

class TestResults:

    def test_errors_group_by_path(self):
        result = ValidationResult([
            ValidationFailure("a", "one"),
            ValidationFailure("a", "two"),
            ValidationFailure("", "whole object"),
        ])
        assert result.errors == {"a": ["one", "two"], "__all__": ["whole object"]}
        assert not result.is_valid

    def test_to_dict(self):
        result = ValidationResult(rule_sets_executed=("Create",))
        assert result.to_dict() == {"is_valid": True, "errors": {}, "rule_sets": ["Create"]}

    def test_validate_or_raise(self):
        with pytest.raises(ValidationFault) as exc:
            StreetValidator().validate_or_raise(Address())
        assert exc.value.errors == {"street": ["'street' must not be empty."]}
        assert exc.value.metadata["validator"] == "StreetValidator"

    def test_validate_or_raise_returns_valid_result(self):
        assert StreetValidator().validate_or_raise(Address(street="1 Main")).is_valid
