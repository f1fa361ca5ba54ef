"""Scope name to scope class lookup."""
from ..exceptions import UnknownScopeError
from .js_scope import JsScope
from .jsx_scope import JsxScope
from .npm_scope import NpmScope
from .wc_scope import WcScope

SCOPES = {
    JsScope.name: JsScope,
    JsxScope.name: JsxScope,
    WcScope.name: WcScope,
    NpmScope.name: NpmScope,
}

SOURCE_SCOPES = (JsScope.name, JsxScope.name, WcScope.name)


def get_scope_class(scope_name: str):
    """Return the class registered for `scope_name`.

    Raises:
        UnknownScopeError: If no scope has that name
    """
    try:
        return SCOPES[scope_name]
    except KeyError:
        raise UnknownScopeError(scope_name) from None
