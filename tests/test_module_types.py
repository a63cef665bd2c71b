"""
Tests for AMD call-site classification.
"""

import pytest

from amd_detective.models import AmdForm
from amd_detective.module_types import (
    form_of,
    is_define,
    is_dependency_form,
    is_driver_script_require,
    is_factory_form,
    is_named_form,
    is_no_dependency_form,
    is_rem_form,
    is_require,
    is_top_level_require,
)
from amd_detective.syntax import CALL_EXPRESSION, parse_source, walk


def first_call(source):
    """Return the first call_expression in source order."""
    for node in walk(parse_source(source)):
        if node.type == CALL_EXPRESSION:
            return node
    raise AssertionError(f"no call in {source!r}")


def all_calls(source):
    return [n for n in walk(parse_source(source)) if n.type == CALL_EXPRESSION]


class TestCallPredicates:
    """Test define/require recognition."""

    def test_define_call(self):
        node = first_call("define([], function () {});")
        assert is_define(node)
        assert not is_require(node)

    def test_require_call(self):
        node = first_call('require("x");')
        assert is_require(node)
        assert not is_define(node)

    def test_main_scoped_require(self):
        node = first_call('require.main.require("x");')
        assert is_require(node)

    def test_other_member_require_is_not_require(self):
        node = first_call('loader.require("x");')
        assert not is_require(node)

    def test_other_call_is_neither(self):
        node = first_call("load();")
        assert not is_define(node)
        assert not is_require(node)

    def test_non_call_node(self):
        tree = parse_source("define;")
        assert not any(is_define(n) or is_require(n) for n in walk(tree))


class TestTopLevelRequire:
    """Test top-level require detection."""

    def test_statement_under_program(self):
        assert is_top_level_require(first_call('require(["a"]);'))

    def test_second_statement_under_program(self):
        calls = all_calls('var x = 1;\nrequire(["a"]);')
        assert is_top_level_require(calls[0])

    def test_nested_in_function(self):
        calls = all_calls('require(["a"], function () { require(["b"]); });')
        assert is_top_level_require(calls[0])
        assert not is_top_level_require(calls[1])

    def test_assigned_require_is_not_top_level(self):
        assert not is_top_level_require(first_call('var a = require("a");'))

    def test_define_is_not_top_level_require(self):
        assert not is_top_level_require(first_call("define([], function () {});"))


class TestFormPredicates:
    """Test the individual AMD form checks."""

    def test_named_form(self):
        node = first_call('define("n", ["a"], function (a) {});')
        assert is_named_form(node)
        assert not is_dependency_form(node)

    def test_named_form_needs_function(self):
        node = first_call('define("n", ["a"], {});')
        assert not is_named_form(node)

    def test_dependency_form(self):
        node = first_call('define(["a"], function (a) {});')
        assert is_dependency_form(node)
        assert not is_named_form(node)

    def test_rem_form(self):
        node = first_call("define(function (require, exports, module) {});")
        assert is_rem_form(node)
        # REM also satisfies the factory check; form_of orders them
        assert is_factory_form(node)

    def test_rem_form_needs_exact_parameters(self):
        node = first_call("define(function (require, exports) {});")
        assert not is_rem_form(node)
        assert is_factory_form(node)

    def test_factory_form(self):
        node = first_call('define(function (require) { require("a"); });')
        assert is_factory_form(node)

    def test_factory_form_needs_require_parameter(self):
        node = first_call("define(function (req) {});")
        assert not is_factory_form(node)

    def test_no_dependency_form(self):
        node = first_call('define({ a: "b" });')
        assert is_no_dependency_form(node)

    def test_driver_script_require(self):
        node = first_call('require(["a"], function (a) {});')
        assert is_driver_script_require(node)

    def test_commonjs_require_is_not_driver(self):
        node = first_call('require("a");')
        assert not is_driver_script_require(node)


class TestFormOf:
    """Test overall form classification."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ('define("n", ["a"], function (a) {});', AmdForm.NAMED),
            ('define(["a"], function (a) {});', AmdForm.DEPS),
            ("define(function (require, exports, module) {});", AmdForm.REM),
            ("define(function (require) {});", AmdForm.FACTORY),
            ('define({ a: "b" });', AmdForm.NODEPS),
            ('require(["a"], function (a) {});', AmdForm.DRIVER),
            ('require(["a"]);', AmdForm.DRIVER),
            ('require("a");', AmdForm.UNKNOWN),
            ('define("n", function () {});', AmdForm.UNKNOWN),
            ("load();", AmdForm.UNKNOWN),
        ],
    )
    def test_form_of(self, source, expected):
        assert form_of(first_call(source)) is expected

    def test_arrow_factory_is_not_recognised(self):
        node = first_call('define(["a"], (a) => a);')
        assert form_of(node) is AmdForm.UNKNOWN
