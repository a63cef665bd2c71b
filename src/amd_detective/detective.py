"""
Dependency extraction for AMD modules.

Walks a JavaScript syntax tree, finds define/require call sites, and
collects the dependency identifiers they declare, including dependencies
pulled in by require calls nested inside a module's factory function.
"""

import time
from typing import Any, List, Mapping, Union

import tree_sitter as ts

from .error_handling import ErrorCategory, InvalidInputError, get_error_handler
from .models import AmdForm, ExtractOptions
from .module_types import form_of, is_define, is_require, is_top_level_require
from .structured_logging import (
    log_degraded_dependency,
    log_extraction_complete,
    log_extraction_start,
)
from .syntax import (
    ARRAY,
    CALL_EXPRESSION,
    array_elements,
    call_arguments,
    is_string_literal,
    node_line,
    node_text,
    parse_source,
    string_value,
    unwrap_parentheses,
    walk,
)

Source = Union[str, ts.Tree, ts.Node]
Options = Union[ExtractOptions, Mapping[str, Any], None]


def extract(source: Source, options: Options = None) -> List[str]:
    """
    Extract the dependencies declared by an AMD module.

    Args:
        source: JavaScript source text, or an already parsed tree or node
        options: ExtractOptions, a mapping with ``skip_lazy_loaded``, or None

    Returns:
        List[str]: Dependencies in first-seen order, without duplicates

    Raises:
        InvalidInputError: If source is None or of an unsupported type
        JavaScriptSyntaxError: If source text cannot be parsed
    """
    if source is None:
        _report_invalid_input("src not given")
    if not isinstance(source, (str, ts.Tree, ts.Node)):
        _report_invalid_input(
            f"src must be source text or a syntax tree, not {type(source).__name__}"
        )

    opts = ExtractOptions.coerce(options)

    if isinstance(source, str) and source == "":
        return []

    started = time.perf_counter()
    log_extraction_start(
        "text" if isinstance(source, str) else "tree", opts.skip_lazy_loaded
    )

    tree = parse_source(source) if isinstance(source, str) else source

    dependencies: List[str] = []
    for node in walk(tree):
        top_level = is_top_level_require(node)
        if not top_level and not is_define(node) and not is_require(node):
            continue

        form = form_of(node)

        if (
            not top_level
            and is_require(node)
            and form is not AmdForm.REM
            and opts.skip_lazy_loaded
        ):
            continue

        dependencies.extend(_get_dependencies(node, form, opts))

    # Computed dependencies evaluate to "" and are dropped with the duplicates
    unique = list(dict.fromkeys(dep for dep in dependencies if dep))
    log_extraction_complete(
        len(unique),
        len(dependencies) - len(unique),
        (time.perf_counter() - started) * 1000,
    )
    return unique


def _report_invalid_input(message: str) -> None:
    try:
        raise InvalidInputError(message)
    except InvalidInputError as e:
        get_error_handler().error(
            ErrorCategory.VALIDATION,
            message,
            "detective",
            "extract",
            exception=e,
        )
        raise


def _get_dependencies(
    node: ts.Node, form: AmdForm, options: ExtractOptions
) -> List[str]:
    """Collect the dependencies of one call site according to its AMD form."""
    # nodeps and unknown forms declare nothing
    if form is AmdForm.NAMED:
        declared = _declared_dependencies(node, 1)
    elif form in (AmdForm.DEPS, AmdForm.DRIVER):
        declared = _declared_dependencies(node, 0)
    elif form in (AmdForm.FACTORY, AmdForm.REM):
        # REM inner requires aren't lazy loaded, but they look the same
        return _get_lazy_loaded_dependencies(node)
    else:
        return []

    if options.skip_lazy_loaded:
        return declared
    return declared + _get_lazy_loaded_dependencies(node)


def _declared_dependencies(node: ts.Node, index: int) -> List[str]:
    args = call_arguments(node)
    if len(args) <= index:
        return []
    return _get_element_values(args[index])


def _get_lazy_loaded_dependencies(node: ts.Node) -> List[str]:
    """Find the modules loaded by require calls inside a subtree."""
    dependencies: List[str] = []

    for inner in walk(node):
        if not is_require(inner):
            continue

        args = call_arguments(inner)
        if not args:
            continue

        # Either require('x') or require(['x'])
        first = unwrap_parentheses(args[0])
        if first.type == ARRAY:
            dependencies.extend(_get_element_values(first))
        else:
            dependencies.append(_get_evaluated_value(first))

    return dependencies


def _get_element_values(node: ts.Node) -> List[str]:
    """Evaluate an array of dependencies, or a single dependency expression."""
    if node.type == ARRAY:
        values = (_get_evaluated_value(el) for el in array_elements(node))
        return [value for value in values if value]
    return [_get_evaluated_value(node)]


def _get_evaluated_value(node: ts.Node) -> str:
    """Return the dependency named by an expression node."""
    node = unwrap_parentheses(node)
    if is_string_literal(node):
        return string_value(node)
    if node.type == CALL_EXPRESSION:
        log_degraded_dependency(node.type, node_line(node), "computed at runtime")
        return ""
    log_degraded_dependency(node.type, node_line(node), "not a string literal")
    return node_text(node)
