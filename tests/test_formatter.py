"""Tests for change record formatting."""

import pytest

from api_changelog.core.formatter import Formatter
from api_changelog.models.change import ChangeKind, ChangeRecord


def make_change(
    prop: str,
    original: str = "",
    new: str = "",
    kind: ChangeKind = ChangeKind.MODIFIED,
    breaking: bool = False,
) -> ChangeRecord:
    """Helper to create a change record."""
    return ChangeRecord(
        property=prop, original=original, new=new, change_kind=kind, breaking=breaking
    )


@pytest.fixture
def formatter():
    return Formatter()


class TestNamedMembers:
    """Collection members such as parameters and response codes."""

    @pytest.mark.parametrize(
        "prop,label",
        [
            ("codes", "Response code"),
            ("parameters", "Parameter"),
            ("properties", "Property"),
            ("schemas", "Schema"),
        ],
    )
    def test_added_and_removed(self, formatter, prop, label):
        added = make_change(prop, new="limit", kind=ChangeKind.OBJECT_ADDED)
        removed = make_change(prop, original="limit", kind=ChangeKind.OBJECT_REMOVED)

        assert formatter.format(added) == f"{label} `limit` added"
        assert formatter.format(removed) == f"{label} `limit` removed"

    def test_empty_values_are_suppressed(self, formatter):
        assert formatter.format(make_change("codes")) == ""

    @pytest.mark.parametrize("prop", ["servers", "responses", "headers", "operation"])
    def test_other_collections_use_generic_wording(self, formatter, prop):
        added = make_change(prop, new="X", kind=ChangeKind.OBJECT_ADDED)
        removed = make_change(prop, original="X", kind=ChangeKind.OBJECT_REMOVED)

        assert formatter.format(added) == f"`{prop}` set to 'X'"
        assert formatter.format(removed) == f"`{prop}` removed (was 'X')"


class TestSpecificProperties:
    """Properties with dedicated wording."""

    def test_version(self, formatter):
        change = make_change("version", "1.0.0", "1.1.0")
        assert (
            formatter.format(change) == "API version updated from `1.0.0` to `1.1.0`"
        )

    def test_deprecated(self, formatter):
        assert formatter.format(make_change("deprecated", "false", "true")) == (
            "Marked as deprecated"
        )
        assert formatter.format(make_change("deprecated", "true", "false")) == (
            "No longer deprecated"
        )

    def test_description_flattens_newlines(self, formatter):
        change = make_change("description", "Old\ntext", "New text")
        text = formatter.format(change)

        assert text == "Description updated:\n  - Old: Old text\n  - New: New text"

    def test_description_is_never_truncated(self, formatter):
        long_text = "word " * 500
        change = make_change("description", "short", long_text)

        assert long_text in formatter.format(change)

    def test_one_sided_description_keeps_both_lines(self, formatter):
        added = make_change("description", new="Hello", kind=ChangeKind.PROPERTY_ADDED)
        removed = make_change(
            "description", original="Bye", kind=ChangeKind.PROPERTY_REMOVED
        )

        assert formatter.format(added) == (
            "Description updated:\n  - Old: \n  - New: Hello"
        )
        assert formatter.format(removed) == (
            "Description updated:\n  - Old: Bye\n  - New: "
        )

    def test_summary(self, formatter):
        change = make_change("summary", "List\nusers", "List all users")
        assert formatter.format(change) == (
            "Summary updated from 'List users' to 'List all users'"
        )

    def test_one_sided_summary(self, formatter):
        assert formatter.format(make_change("summary", new="Pets")) == (
            "Summary updated from '' to 'Pets'"
        )
        assert formatter.format(make_change("summary", original="Pets")) == (
            "Summary updated from 'Pets' to ''"
        )

    @pytest.mark.parametrize("prop", ["$ref", "reference"])
    def test_reference(self, formatter, prop):
        a = "#/components/schemas/A"
        b = "#/components/schemas/B"

        assert formatter.format(make_change(prop, a, b)) == (
            f"Reference changed from `{a}` to `{b}`"
        )
        assert formatter.format(make_change(prop, a, a)) == ""
        assert formatter.format(make_change(prop, new=b)) == f"Reference set to `{b}`"
        assert formatter.format(make_change(prop, original=a)) == (
            f"Reference `{a}` removed"
        )

    @pytest.mark.parametrize(
        "prop,label", [("url", "URL"), ("type", "Type"), ("format", "Format")]
    )
    def test_changed_labels_need_both_values(self, formatter, prop, label):
        assert formatter.format(make_change(prop, "a", "b")) == (
            f"{label} changed from `a` to `b`"
        )
        assert formatter.format(make_change(prop, new="b")) == ""
        assert formatter.format(make_change(prop, original="a")) == ""

    def test_required_flips(self, formatter):
        assert formatter.format(make_change("required", "false", "true")) == (
            "Now required"
        )
        assert formatter.format(make_change("required", "true", "false")) == (
            "No longer required"
        )
        assert formatter.format(make_change("required", "", "true")) == ""


class TestPathsAndExtensions:
    def test_endpoint_added(self, formatter):
        change = make_change("/users", new="/users", kind=ChangeKind.OBJECT_ADDED)
        assert formatter.format(change) == "Endpoint `/users` added"

    def test_endpoint_removed(self, formatter):
        change = make_change(
            "/users", original="/users", kind=ChangeKind.OBJECT_REMOVED
        )
        assert formatter.format(change) == "Endpoint `/users` removed"

    def test_extension(self, formatter):
        assert formatter.format(make_change("x-internal", "a", "b")) == (
            "Extension `x-internal` modified"
        )
        assert formatter.format(make_change("x-internal", new="b")) == (
            "Extension `x-internal` added"
        )
        assert formatter.format(make_change("x-internal", original="a")) == (
            "Extension `x-internal` removed"
        )


class TestGenericFallback:
    def test_changed(self, formatter):
        change = make_change("operationId", "listUsers", "getUsers")
        assert formatter.format(change) == (
            "`operationId` changed from 'listUsers' to 'getUsers'"
        )

    def test_equal_values_are_suppressed(self, formatter):
        assert formatter.format(make_change("title", "Same", "Same")) == ""

    def test_set_removed_and_modified(self, formatter):
        assert formatter.format(make_change("title", new="Pets")) == (
            "`title` set to 'Pets'"
        )
        assert formatter.format(make_change("title", original="Pets")) == (
            "`title` removed (was 'Pets')"
        )
        assert formatter.format(make_change("title")) == "`title` modified"


class TestContext:
    def test_context_is_prefixed(self, formatter):
        change = make_change("deprecated", "false", "true")
        assert formatter.format_with_context(change, "GET /users") == (
            "**GET /users**: Marked as deprecated"
        )

    def test_context_already_present_is_not_repeated(self, formatter):
        change = make_change("schemas", new="User", kind=ChangeKind.OBJECT_ADDED)
        assert formatter.format_with_context(change, "User") == "Schema `User` added"

    def test_empty_description_stays_empty(self, formatter):
        change = make_change("title", "Same", "Same")
        assert formatter.format_with_context(change, "Components") == ""

    def test_no_context(self, formatter):
        change = make_change("version", "1", "2")
        assert formatter.format_with_context(change) == (
            "API version updated from `1` to `2`"
        )
