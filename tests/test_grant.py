"""Tests for the Grant checking surface."""

from __future__ import annotations

import math
from typing import Any, NoReturn

import pytest

from grantcore import (
    ALLOW,
    AccessDeniedError,
    CheckResult,
    ErrorReporter,
    FieldMap,
    Grant,
    GrantError,
    InvalidArgumentError,
)


class TestProvenance:
    """Target and match are carried, never inspected."""

    def test_accessors(self) -> None:
        match = {"user_id": 7}
        grant = Grant({"read": True}, target="User", match=match)
        assert grant.get_target() == "User"
        assert grant.target == "User"
        assert grant.get_match() is match
        assert grant.match is match

    def test_as_object(self) -> None:
        raw = {"read": True, "update": {"name": True}}
        assert Grant(raw).as_object() == raw

    def test_get_raw_data(self) -> None:
        grant = Grant({"update": {"name": True}, "all": True})
        assert grant.get("update") == {"name": True}
        assert grant.get("update.name") is True
        assert grant.get("update.email") is False
        assert grant.get("all.anything") is True

    def test_get_mask(self) -> None:
        grant = Grant({"update": {"name": True}})
        assert grant.get_mask("update") == FieldMap({"name": ALLOW})


class TestHasAndCheck:
    """Tests for scalar field checks."""

    def test_scalar_field_scenario(self) -> None:
        grant = Grant({"name": True, "email": False}, target="User", match={"id": 1})
        assert grant.has("name")
        assert not grant.has("email")
        with pytest.raises(AccessDeniedError) as exc_info:
            grant.check("email")
        assert exc_info.value.grant_key == "email"
        assert exc_info.value.target == "User"
        assert exc_info.value.match == {"id": 1}
        assert "Access denied trying to email a target of type User" in str(exc_info.value)

    def test_check_without_target(self) -> None:
        grant = Grant({"name": True})
        with pytest.raises(AccessDeniedError, match="Access denied trying to email$") as exc_info:
            grant.check("email")
        assert exc_info.value.details == {"grant_key": "email"}

    def test_full_grant(self) -> None:
        grant = Grant(True)
        assert grant.has("anything.at.all")
        assert grant.check(["a", "b.c"])

    def test_empty_grant(self) -> None:
        grant = Grant(False)
        assert not grant.has("a")
        assert Grant().has([])

    def test_sequence_short_circuits(self) -> None:
        grant = Grant({"a": True, "b": False, "c": False})
        assert grant.has(["a"])
        assert not grant.has(["a", "b"])
        with pytest.raises(AccessDeniedError) as exc_info:
            grant.check(["a", "b", "c"])
        assert exc_info.value.grant_key == "b"

    def test_flags_respect_values(self) -> None:
        grant = Grant({"read": True, "delete": False})
        assert grant.has({"read": True, "delete": False})
        assert not grant.has({"read": True, "delete": True})
        assert grant.check({"read": 1, "delete": 0})
        with pytest.raises(AccessDeniedError):
            grant.check({"delete": True})

    def test_prefix(self) -> None:
        grant = Grant({"update": {"name": True}})
        assert grant.has("name", prefix="update.")
        assert grant.check(["name"], "update.")
        with pytest.raises(AccessDeniedError) as exc_info:
            grant.check("email", "update.")
        assert exc_info.value.grant_key == "update.email"

    def test_structured_mask_is_not_scalar_access(self) -> None:
        grant = Grant({"update": {"name": True}})
        assert not grant.has("update")
        assert grant.has_any("update")
        assert not grant.has_any("delete")

    def test_invalid_key(self) -> None:
        grant = Grant({"a": True})
        assert not grant.has(42)
        assert not grant.has(None)
        with pytest.raises(InvalidArgumentError):
            grant.check(42)
        with pytest.raises(InvalidArgumentError):
            grant.check(None)

    @pytest.mark.parametrize("keys", [["a", 5], ("a", None), ["a", ["a", 3.5]], {1: True}])
    def test_invalid_key_inside_collection(self, keys) -> None:
        """A bad element is an invalid argument, never a TypeError."""
        grant = Grant({"a": True})
        assert grant.has(keys) is False
        with pytest.raises(InvalidArgumentError):
            grant.check(keys)
        with pytest.raises(InvalidArgumentError):
            grant.evaluate(keys)

    def test_nested_key_collections(self) -> None:
        grant = Grant({"a": True, "b": True})
        assert grant.has(["a", ["b"]])
        assert grant.check(["a", ("b", {"a": True, "c": False})])
        assert not grant.has(["a", ["c"]])
        with pytest.raises(AccessDeniedError):
            grant.check(["a", ["c"]])

    def test_invalid_argument_is_not_access_denied(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            Grant({}).check(3.5)
        assert not isinstance(exc_info.value, AccessDeniedError)
        assert isinstance(exc_info.value, GrantError)

    def test_explicit_operations(self) -> None:
        grant = Grant({"a": True, "b": True})
        assert grant.check_path("a")
        assert grant.check_paths(["a", "b"])
        assert grant.check_flags({"a": True, "c": False})
        with pytest.raises(AccessDeniedError):
            grant.check_paths(("a", "c"))


class TestEvaluate:
    """Result-typed checks."""

    def test_authorized(self) -> None:
        result = Grant({"a": True}).evaluate_path("a")
        assert result.allowed
        assert not result.denied
        assert result.reason == ""

    def test_denied(self) -> None:
        result = Grant({"a": True}, target="Doc").evaluate(["a", "b"])
        assert isinstance(result, CheckResult)
        assert result.denied
        assert result.grant_key == "b"
        assert result.details["target"] == "Doc"

    def test_raise_for_denial(self) -> None:
        grant = Grant({"a": True})
        result = grant.evaluate_path("b")

        class Recorder(ErrorReporter):
            def __init__(self) -> None:
                self.calls: list[tuple[str, dict[str, Any]]] = []

            def access_denied(self, message: str, **details: Any) -> NoReturn:
                self.calls.append((message, details))
                raise RuntimeError(message)

            def invalid_argument(self, message: str, **details: Any) -> NoReturn:
                raise RuntimeError(message)

        recorder = Recorder()
        with pytest.raises(RuntimeError, match="Access denied trying to b"):
            result.raise_for_denial(recorder)
        assert recorder.calls == [("Access denied trying to b", {"grant_key": "b"})]

    def test_custom_reporter_used_by_checks(self) -> None:
        class DomainDenied(Exception):
            pass

        class DomainReporter(ErrorReporter):
            def access_denied(self, message: str, **details: Any) -> NoReturn:
                raise DomainDenied(details.get("grant_key"))

            def invalid_argument(self, message: str, **details: Any) -> NoReturn:
                raise TypeError(message)

        grant = Grant({"a": True}, reporter=DomainReporter())
        with pytest.raises(DomainDenied, match="b"):
            grant.check("b")
        with pytest.raises(TypeError):
            grant.check(1)
        with pytest.raises(DomainDenied):
            grant.create_subgrant_from_path("missing").check_number("x", 1)


class TestCheckMask:
    """Tests for whole-object checks."""

    def test_object_mask_scenario(self) -> None:
        grant = Grant({"updateMask": {"name": True}}, target="User")
        assert grant.check_mask("updateMask", {"name": "x"})
        with pytest.raises(AccessDeniedError) as exc_info:
            grant.check_mask("updateMask", {"name": "x", "email": "y"})
        error = exc_info.value
        assert error.details["field"] == "email"
        assert error.grant_key == "updateMask"
        assert str(error) == (
            "Access denied in updateMask for objects of type User to access field email"
        )

    def test_direct_mask_value(self) -> None:
        grant = Grant({}, target="User")
        assert grant.check_mask({"name": True}, {"name": "x"})
        with pytest.raises(AccessDeniedError, match="Access denied in mask"):
            grant.check_mask({"name": True}, {"age": 3})

    def test_nested_and_list_fields(self) -> None:
        grant = Grant({"update": {"tags": [True], "address": {"city": True}}})
        assert grant.check_mask("update", {"tags": ["a", "b"], "address": {"city": "c"}})
        result = grant.evaluate_object("update", {"address": {"zip": "1"}})
        assert result.details["field"] == "address.zip"

    @pytest.mark.parametrize(
        ("obj", "field"),
        [
            ({"name": "x", "email": {}}, "email"),
            ({"roles": []}, "roles"),
            ({"email": {"primary": "y"}}, "email"),
            ({"name": "x", "roles": ["admin"]}, "roles"),
        ],
    )
    def test_denied_container_field_reported(self, obj, field) -> None:
        grant = Grant({"updateMask": {"name": True}}, target="User")
        with pytest.raises(AccessDeniedError) as exc_info:
            grant.check_mask("updateMask", obj)
        assert exc_info.value.details["field"] == field

    def test_empty_object_passes_denied_mask(self) -> None:
        grant = Grant({"updateMask": {"name": True}}, target="User")
        assert grant.check_mask("missing", {})

    @pytest.mark.parametrize("obj", [None, "text", 5, True])
    def test_non_object_rejected(self, obj) -> None:
        grant = Grant({"update": True})
        with pytest.raises(InvalidArgumentError, match="non-object"):
            grant.check_mask("update", obj)

    def test_list_object_accepted(self) -> None:
        grant = Grant({"rows": [{"id": True}]})
        assert grant.check_mask("rows", [{"id": 1}, {"id": 2}])


class TestNumbers:
    """Tests for numeric grants."""

    def test_min_max(self) -> None:
        grant = Grant({
            "limit": {"grantNumber": True, "min": 1, "max": 100},
            "open": {"grantNumber": True, "min": True, "max": True},
            "all": True,
            "name": {"first": True},
        })
        assert grant.min("limit") == 1
        assert grant.max("limit") == 100
        assert grant.min("open") == -math.inf
        assert grant.max("open") == math.inf
        assert grant.min("all") == -math.inf
        assert grant.max("all") == math.inf
        assert grant.min("name") is None
        assert grant.max("missing") is None

    def test_check_number_in_range(self) -> None:
        grant = Grant({"limit": {"grantNumber": True, "min": 1, "max": 100}})
        assert grant.check_number("limit", 1)
        assert grant.check_number("limit", 100)
        assert grant.check_number("limit", 50.5)

    def test_below_minimum(self) -> None:
        grant = Grant({"limit": {"grantNumber": True, "min": 1, "max": 100}}, target="Quota")
        with pytest.raises(AccessDeniedError, match="smaller than grant minimum") as exc_info:
            grant.check_number("limit", 0)
        assert exc_info.value.details["minimum"] == 1
        assert exc_info.value.details["value"] == 0
        assert exc_info.value.target == "Quota"

    def test_above_maximum(self) -> None:
        grant = Grant({"limit": {"grantNumber": True, "min": 1, "max": 100}})
        with pytest.raises(AccessDeniedError, match="greater than grant maximum") as exc_info:
            grant.check_number("limit", 101)
        assert exc_info.value.details["maximum"] == 100

    def test_missing_grant(self) -> None:
        grant = Grant({"name": True})
        with pytest.raises(AccessDeniedError, match="non-numeric or missing grant"):
            grant.check_number("limit", 5)

    @pytest.mark.parametrize("value", ["5", None, True, float("nan")])
    def test_non_numeric_input(self, value) -> None:
        grant = Grant({"limit": {"grantNumber": True, "min": 1, "max": 100}})
        with pytest.raises(AccessDeniedError, match="non-numeric input"):
            grant.check_number("limit", value)

    def test_full_access_allows_any_number(self) -> None:
        assert Grant(True).check_number("limit", -1e12)

    def test_evaluate_number(self) -> None:
        grant = Grant({"limit": {"grantNumber": True, "min": 1, "max": 3}})
        assert grant.evaluate_number("limit", 2).allowed
        assert grant.evaluate_number("limit", 4).details["maximum"] == 3


class TestSubgrants:
    """Tests for sub-grant derivation."""

    def test_from_path(self) -> None:
        grant = Grant({"a": {"b": True, "c": False}}, target="Doc", match={"id": 2})
        sub = grant.create_subgrant_from_path("a")
        assert sub.has("b")
        assert not sub.has("c")
        assert sub.get_target() == "Doc"
        assert sub.get_match() == {"id": 2}

    def test_from_missing_path(self) -> None:
        sub = Grant({"a": True}).create_subgrant_from_path("z")
        assert not sub.has("anything")
        assert sub.as_object() is False

    def test_from_mask_value(self) -> None:
        sub = Grant({}).create_subgrant_from_path({"x": True})
        assert sub.has("x")

    def test_from_paths_combines(self) -> None:
        grant = Grant({
            "read": {"name": True},
            "write": {"email": True, "age": {"grantNumber": True, "min": 0, "max": 10}},
            "admin": {"age": {"grantNumber": True, "min": 5, "max": 150}},
        })
        sub = grant.create_subgrant_from_paths(["read", "write", "admin"])
        assert sub.has(["name", "email"])
        assert sub.min("age") == 0
        assert sub.max("age") == 150

    def test_subgrant_is_independent(self) -> None:
        grant = Grant({"a": {"b": True}})
        sub = grant.create_subgrant_from_paths(["a"])
        exported = sub.as_object()
        exported["c"] = True
        assert not sub.has("c")
        assert grant.as_object() == {"a": {"b": True}}


class TestStaticHelpers:
    """Raw-data helpers kept on Grant."""

    def test_combine_grants(self) -> None:
        assert Grant.combine_grants({"a": True}, {"b": True}) == {"a": True, "b": True}
        assert Grant.combine_grants({"a": True}, True) is True

    def test_grant_numbers_to_objects(self) -> None:
        assert Grant.grant_numbers_to_objects({"n": 4}) == {
            "n": {"grantNumber": True, "min": 4, "max": 4}
        }
