"""Per-file, per-scope collection of imports and usage sites."""
from typing import Dict, List, Union

from .models import FunctionCall, ImportRecord, JsxElement, Token, WcElement

UsageSite = Union[Token, FunctionCall, JsxElement, WcElement]


class Accumulator:
    """Mutable result set filled by node handlers during one traversal.

    `imports` keeps declaration order; matchers rely on it to resolve
    shadowed bindings. `usage_imports` stays empty until the scope runs
    its matching pass.
    """

    def __init__(self):
        self.imports: List[ImportRecord] = []
        self.tokens: List[Token] = []
        self.functions: List[FunctionCall] = []
        self.elements: List[Union[JsxElement, WcElement]] = []
        self.script_sources: List[str] = []
        self.warnings: List[Exception] = []
        self.usage_imports: Dict[UsageSite, ImportRecord] = {}

    def __repr__(self) -> str:
        return (
            f"Accumulator(imports={len(self.imports)}, tokens={len(self.tokens)}, "
            f"functions={len(self.functions)}, elements={len(self.elements)})"
        )
