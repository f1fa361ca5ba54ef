"""Tests for literal values and access paths."""
import pytest

from depscope.analyzer.models import ComplexValue
from depscope.analyzer.values import get_access_path, get_node_value
from depscope.exceptions import NoAttributeExpressionFoundError

from conftest import parse_code


def _expression(code, path='a.js'):
    """First expression of the first statement."""
    statement = parse_code(code, path).root_node.named_children[0]
    return statement.named_children[0]


@pytest.mark.parametrize('code,expected', [
    ("a", ['a']),
    ("a.b.c", ['a', 'b', 'c']),
    ("a.b['c'].d()", ['a', 'b', 'c', 'd']),
    ("a[0].b", ['a', '0', 'b']),
    ("x[BLA['y']]", ['x', 'BLA.y']),
    ("a?.b?.c", ['a', 'b', 'c']),
    ("this.props.value", ['this', 'props', 'value']),
    ("make().then", ['make', 'then']),
])
def test_access_path(code, expected):
    assert get_access_path(_expression(code)) == expected


def test_non_null_assertion_is_transparent():
    assert get_access_path(_expression("ref!.current", 'a.ts')) == ['ref', 'current']


@pytest.mark.parametrize('code,expected', [
    ("'text'", 'text'),
    ('"double"', 'double'),
    ("42", 42),
    ("0x10", 16),
    ("2.5", 2.5),
    ("true", True),
    ("false", False),
    ("null", None),
    ("undefined", None),
    ("someVariable", ComplexValue('someVariable')),
    ("{ a: 1 }", ComplexValue('{ a: 1 }')),
])
def test_node_value(code, expected):
    expression = _expression(f"f({code})")
    argument = expression.child_by_field_name('arguments').named_children[0]
    assert get_node_value(argument) == expected


def _jsx_attribute_value(markup):
    root = parse_code(f"const x = {markup};").root_node
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == 'jsx_attribute':
            return node.named_children[1]
        stack.extend(node.children)
    raise AssertionError('no attribute found')


def test_jsx_expression_value():
    assert get_node_value(_jsx_attribute_value("<A size={4} />")) == 4


def test_jsx_identifier_expression_is_complex():
    value = get_node_value(_jsx_attribute_value("<A onClick={handler} />"))
    assert value == ComplexValue('handler')


def test_empty_jsx_expression_raises():
    with pytest.raises(NoAttributeExpressionFoundError):
        get_node_value(_jsx_attribute_value("<A title={} />"))
