"""Plain JavaScript usage: identifiers, access chains and function calls."""
from ..analyzer.handlers import (
    AccessExpressionNodeHandler,
    DynamicImportDeclaratorHandler,
    FunctionCallNodeHandler,
    IdentifierNodeHandler,
    ImportNodeHandler,
)
from ..analyzer.matchers import BINDING_MATCHERS
from .base import SourceScope

JS_HANDLER_MAP = {
    'import_statement': ImportNodeHandler,
    'variable_declarator': DynamicImportDeclaratorHandler,
    'identifier': IdentifierNodeHandler,
    'shorthand_property_identifier': IdentifierNodeHandler,
    'member_expression': AccessExpressionNodeHandler,
    'subscript_expression': AccessExpressionNodeHandler,
    'call_expression': FunctionCallNodeHandler,
}


class JsScope(SourceScope):
    """Attribute tokens and function calls to imports of the instrumented package."""

    name = 'js'
    file_extensions = (
        '.js', '.mjs', '.cjs', '.jsx', '.mjsx', '.cjsx',
        '.ts', '.mts', '.cts', '.tsx', '.mtsx', '.ctsx',
    )

    def handler_map(self):
        return JS_HANDLER_MAP

    def usages(self, accumulator):
        return [*accumulator.tokens, *accumulator.functions]

    def matchers_for(self, usage):
        return BINDING_MATCHERS
