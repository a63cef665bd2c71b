"""
Node classification for AMD modules.

Answers whether a tree-sitter node is a ``define`` call, a ``require`` call
or a top-level ``require`` call, and sniffs which AMD form a definition
uses.
"""

from typing import Optional

import tree_sitter as ts

from .models import AmdForm
from .syntax import (
    ARRAY,
    CALL_EXPRESSION,
    EXPRESSION_STATEMENT,
    FUNCTION_EXPRESSION_TYPES,
    IDENTIFIER,
    MEMBER_EXPRESSION,
    OBJECT,
    PROGRAM,
    call_arguments,
    function_parameters,
    is_identifier,
    is_string_literal,
)

REM_PARAMETERS = ("require", "exports", "module")


def _callee(node: Optional[ts.Node]) -> Optional[ts.Node]:
    if node is None or node.type != CALL_EXPRESSION:
        return None
    return node.child_by_field_name("function")


def _is_plain_require(node: ts.Node) -> bool:
    callee = _callee(node)
    return callee is not None and callee.type == IDENTIFIER and is_identifier(
        callee, "require"
    )


def _is_main_scoped_require(node: ts.Node) -> bool:
    # require.main.require("x")
    callee = _callee(node)
    if callee is None or callee.type != MEMBER_EXPRESSION:
        return False
    if not is_identifier(callee.child_by_field_name("property"), "require"):
        return False
    obj = callee.child_by_field_name("object")
    if obj is None or obj.type != MEMBER_EXPRESSION:
        return False
    return is_identifier(obj.child_by_field_name("object"), "require") and is_identifier(
        obj.child_by_field_name("property"), "main"
    )


def is_define(node: ts.Node) -> bool:
    """True for a call of the global ``define`` function."""
    callee = _callee(node)
    return callee is not None and callee.type == IDENTIFIER and is_identifier(
        callee, "define"
    )


def is_require(node: ts.Node) -> bool:
    """True for ``require(...)`` and ``require.main.require(...)`` calls."""
    return _is_plain_require(node) or _is_main_scoped_require(node)


def is_top_level_require(node: ts.Node) -> bool:
    """True for a require call that forms a statement directly under the program."""
    if not is_require(node):
        return False
    statement = node.parent
    if statement is None or statement.type != EXPRESSION_STATEMENT:
        return False
    program = statement.parent
    return program is not None and program.type == PROGRAM


def _is_function_expression(node: ts.Node) -> bool:
    return node.type in FUNCTION_EXPRESSION_TYPES


def is_named_form(node: ts.Node) -> bool:
    """define('name', [deps], function(...) {})"""
    if not is_define(node):
        return False
    args = call_arguments(node)
    return (
        len(args) == 3
        and is_string_literal(args[0])
        and args[1].type == ARRAY
        and _is_function_expression(args[2])
    )


def is_dependency_form(node: ts.Node) -> bool:
    """define([deps], function(...) {})"""
    if not is_define(node):
        return False
    args = call_arguments(node)
    return (
        len(args) == 2 and args[0].type == ARRAY and _is_function_expression(args[1])
    )


def is_rem_form(node: ts.Node) -> bool:
    """define(function(require, exports, module) {})"""
    if not is_define(node):
        return False
    args = call_arguments(node)
    if not args or not _is_function_expression(args[0]):
        return False
    params = function_parameters(args[0])
    if len(params) != len(REM_PARAMETERS):
        return False
    return all(
        param.type == IDENTIFIER and is_identifier(param, name)
        for param, name in zip(params, REM_PARAMETERS)
    )


def is_factory_form(node: ts.Node) -> bool:
    """define(function(require) {})"""
    if not is_define(node):
        return False
    args = call_arguments(node)
    if len(args) != 1 or not _is_function_expression(args[0]):
        return False
    params = function_parameters(args[0])
    return bool(params) and params[0].type == IDENTIFIER and is_identifier(
        params[0], "require"
    )


def is_no_dependency_form(node: ts.Node) -> bool:
    """define({})"""
    if not is_define(node):
        return False
    args = call_arguments(node)
    return len(args) == 1 and args[0].type == OBJECT


def is_driver_script_require(node: ts.Node) -> bool:
    """require([deps], function(...) {})"""
    if not is_require(node):
        return False
    args = call_arguments(node)
    return bool(args) and args[0].type == ARRAY


def form_of(node: ts.Node) -> AmdForm:
    """
    Classify the AMD form of a call site.

    The checks run in a fixed order and the first match wins, so a REM
    definition is never reported as a factory.
    """
    if is_named_form(node):
        return AmdForm.NAMED
    if is_dependency_form(node):
        return AmdForm.DEPS
    if is_rem_form(node):
        return AmdForm.REM
    if is_factory_form(node):
        return AmdForm.FACTORY
    if is_no_dependency_form(node):
        return AmdForm.NODEPS
    if is_driver_script_require(node):
        return AmdForm.DRIVER
    return AmdForm.UNKNOWN
