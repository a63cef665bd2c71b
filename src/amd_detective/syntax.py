"""
JavaScript syntax layer built on tree-sitter.

Parses source text into a tree-sitter tree, walks it in a deterministic
pre-order, and exposes the small set of node helpers the extractor needs:
node source text, string literal values, call arguments and array elements.
"""

import threading
from typing import Iterator, List, Optional, Union

import tree_sitter as ts
import tree_sitter_javascript as ts_js

from .error_handling import JavaScriptSyntaxError

# Node types produced by the tree-sitter JavaScript grammar
PROGRAM = "program"
CALL_EXPRESSION = "call_expression"
MEMBER_EXPRESSION = "member_expression"
IDENTIFIER = "identifier"
PROPERTY_IDENTIFIER = "property_identifier"
STRING = "string"
TEMPLATE_STRING = "template_string"
ARRAY = "array"
OBJECT = "object"
EXPRESSION_STATEMENT = "expression_statement"
PARENTHESIZED_EXPRESSION = "parenthesized_expression"
COMMENT = "comment"

# Older grammar releases name anonymous function expressions "function"
FUNCTION_EXPRESSION_TYPES = frozenset({"function_expression", "function"})

SyntaxTree = Union[ts.Tree, ts.Node]

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

_LINE_CONTINUATIONS = {"\n", "\r\n", "\r", "\u2028", "\u2029"}
_OCTAL_DIGITS = frozenset("01234567")

_local = threading.local()
_language: Optional[ts.Language] = None


def _get_language() -> ts.Language:
    global _language
    if _language is None:
        _language = ts.Language(ts_js.language())
    return _language


def _get_parser() -> ts.Parser:
    """Return the parser for the current thread, creating it on first use."""
    parser = getattr(_local, "parser", None)
    if parser is None:
        parser = ts.Parser(_get_language())
        _local.parser = parser
    return parser


def parse_source(source: str, filename: Optional[str] = None) -> ts.Tree:
    """
    Parse JavaScript source text.

    Args:
        source: The full file contents
        filename: Optional file name, reported in syntax errors

    Returns:
        ts.Tree: The parse tree

    Raises:
        JavaScriptSyntaxError: If the source contains syntax errors
    """
    tree = _get_parser().parse(source.encode("utf-8"))
    if tree.root_node.has_error:
        bad = _first_error_node(tree.root_node)
        if bad is None:
            raise JavaScriptSyntaxError("Invalid JavaScript", filename=filename)
        kind = f"missing {bad.type!r}" if bad.is_missing else "unexpected token"
        raise JavaScriptSyntaxError(
            f"Invalid JavaScript: {kind}",
            lineno=bad.start_point[0] + 1,
            column=bad.start_point[1] + 1,
            filename=filename,
        )
    return tree


def _first_error_node(root: ts.Node) -> Optional[ts.Node]:
    for node in walk(root):
        if node.is_error or node.is_missing:
            return node
    return None


def root_of(tree: SyntaxTree) -> ts.Node:
    """Return the root node of a tree, or the node itself."""
    if isinstance(tree, ts.Tree):
        return tree.root_node
    return tree


def walk(tree: SyntaxTree) -> Iterator[ts.Node]:
    """
    Yield every node of a tree or subtree in pre-order.

    The walk uses an explicit stack, so the depth of the source does not
    matter, and visits siblings in source order.
    """
    stack = [root_of(tree)]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def node_text(node: ts.Node) -> str:
    """Return the source text spanned by a node."""
    text = node.text
    if text is None:
        return ""
    return text.decode("utf-8", errors="replace")


def node_line(node: ts.Node) -> int:
    """1-based line number of a node."""
    return node.start_point[0] + 1


def unwrap_parentheses(node: ts.Node) -> ts.Node:
    """Return the expression inside any number of enclosing parentheses."""
    while node.type == PARENTHESIZED_EXPRESSION:
        inner = _without_comments(node.named_children)
        if not inner:
            break
        node = inner[0]
    return node


def _decode_escape(sequence: str) -> str:
    body = sequence[1:]
    if body in _LINE_CONTINUATIONS:
        return ""
    if body[:1] in ("x", "u") and len(body) > 1:
        try:
            return chr(int(body[1:].strip("{}"), 16))
        except ValueError:
            return body
    # Legacy octal escapes, "\101" is "A"
    if body and all(c in _OCTAL_DIGITS for c in body):
        return chr(int(body, 8))
    return _SIMPLE_ESCAPES.get(body, body)


def is_string_literal(node: ts.Node) -> bool:
    """True for quoted strings and template strings without substitutions."""
    if node.type == STRING:
        return True
    if node.type == TEMPLATE_STRING:
        return not any(c.type == "template_substitution" for c in node.named_children)
    return False


def string_value(node: ts.Node) -> str:
    """Return the decoded value of a string literal node."""
    parts = []
    for child in node.named_children:
        if child.type == "string_fragment":
            parts.append(node_text(child))
        elif child.type == "escape_sequence":
            parts.append(_decode_escape(node_text(child)))
    return "".join(parts)


def _without_comments(nodes: List[ts.Node]) -> List[ts.Node]:
    return [n for n in nodes if n.type != COMMENT]


def call_arguments(node: ts.Node) -> List[ts.Node]:
    """Return the argument expressions of a call_expression node."""
    args = node.child_by_field_name("arguments")
    # Tagged templates (require`x`) carry a template_string here
    if args is None or args.type != "arguments":
        return []
    return _without_comments(args.named_children)


def array_elements(node: ts.Node) -> List[ts.Node]:
    """Return the element expressions of an array node."""
    return _without_comments(node.named_children)


def function_parameters(node: ts.Node) -> List[ts.Node]:
    """Return the parameter nodes of a function expression."""
    params = node.child_by_field_name("parameters")
    if params is None:
        return []
    return _without_comments(params.named_children)


def is_identifier(node: Optional[ts.Node], name: str) -> bool:
    return (
        node is not None
        and node.type in (IDENTIFIER, PROPERTY_IDENTIFIER)
        and node_text(node) == name
    )
