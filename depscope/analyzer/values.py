"""Literal value extraction and access-path computation for script nodes."""
from typing import Any, Callable, Dict, List

from tree_sitter import Node

from ..exceptions import NoAttributeExpressionFoundError
from .adapters import node_text
from .models import ComplexValue

IGNORED_TYPES = {'comment'}


def _string_value(node: Node) -> str:
    return node_text(node)[1:-1]


def _number_value(node: Node) -> Any:
    text = node_text(node).replace('_', '')
    try:
        return int(text, 0)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return ComplexValue(node_text(node))


def _identifier_value(node: Node) -> Any:
    if node_text(node) == 'undefined':
        return None
    return ComplexValue(node_text(node))


def _jsx_expression_value(node: Node) -> Any:
    inner = [child for child in node.named_children if child.type not in IGNORED_TYPES]
    if not inner:
        raise NoAttributeExpressionFoundError(node_text(node))
    if inner[0].type == 'spread_element':
        return ComplexValue(node_text(node))
    return get_node_value(inner[0])


VALUE_HANDLERS: Dict[str, Callable[[Node], Any]] = {
    'string': _string_value,
    'number': _number_value,
    'true': lambda node: True,
    'false': lambda node: False,
    'null': lambda node: None,
    'undefined': lambda node: None,
    'identifier': _identifier_value,
    'jsx_expression': _jsx_expression_value,
}


def get_node_value(node: Node) -> Any:
    """Reduce an expression node to a Python literal.

    Strings, numbers, booleans, null and undefined become their Python
    equivalents; anything else is wrapped in ComplexValue with its source text.

    Raises:
        NoAttributeExpressionFoundError: For an empty JSX expression container
    """
    handler = VALUE_HANDLERS.get(node.type)
    if handler is None:
        return ComplexValue(node_text(node))
    return handler(node)


def index_segment(index: Node) -> str:
    """Access-path segment for the index of `obj[index]`."""
    value = get_node_value(index)
    if isinstance(value, ComplexValue):
        return '.'.join(get_access_path(index))
    if value is None:
        return ''
    return str(value)


def get_access_path(node: Node) -> List[str]:
    """Root-first list of names reached by an identifier, access chain or call.

    `a.b['c'].d()` yields ['a', 'b', 'c', 'd']. A chain rooted at something
    other than an identifier (`this`, a literal, a parenthesized expression)
    keeps that root's source text as its first segment.
    """
    segments = []
    current = node
    while current is not None:
        node_type = current.type
        if node_type == 'member_expression':
            segments.append(node_text(current.child_by_field_name('property')))
            current = current.child_by_field_name('object')
        elif node_type == 'subscript_expression':
            segments.append(index_segment(current.child_by_field_name('index')))
            current = current.child_by_field_name('object')
        elif node_type == 'call_expression':
            current = current.child_by_field_name('function')
        elif node_type == 'non_null_expression':
            current = current.named_children[0] if current.named_children else None
        else:
            segments.append(node_text(current))
            current = None
    segments.reverse()
    return segments
