"""JSX element usage."""
from ..analyzer.handlers import DynamicImportDeclaratorHandler, FunctionCallNodeHandler, ImportNodeHandler, JsxElementNodeHandler
from ..analyzer.matchers import BINDING_MATCHERS
from .base import SourceScope

JSX_HANDLER_MAP = {
    'import_statement': ImportNodeHandler,
    'variable_declarator': DynamicImportDeclaratorHandler,
    'call_expression': FunctionCallNodeHandler,
    'jsx_element': JsxElementNodeHandler,
    'jsx_self_closing_element': JsxElementNodeHandler,
}


class JsxScope(SourceScope):
    """Attribute JSX tags (`<Button/>`, `<Lib.Button/>`, `<MySlug/>`) to their imports."""

    name = 'jsx'
    file_extensions = ('.js', '.mjs', '.cjs', '.jsx', '.mjsx', '.cjsx', '.tsx', '.mtsx', '.ctsx')

    def handler_map(self):
        return JSX_HANDLER_MAP

    def usages(self, accumulator):
        return list(accumulator.elements)

    def matchers_for(self, usage):
        return BINDING_MATCHERS
