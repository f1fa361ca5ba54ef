"""Consistent substitution of captured values that are not on an allow list."""
from typing import Any, Dict, Iterable, Optional

from ..analyzer.models import ComplexValue


class Redactor:
    """Replace free-form captured values with stable `[redactedN]` tokens.

    The same input always maps to the same token for the lifetime of the
    Redactor, so one instance is created per analysis run. Numbers, booleans
    and None carry no user text and pass through unchanged.

    `allowed_values` is the default allow list; callers that keep separate
    lists (attribute values, call arguments) pass theirs per call.
    """

    def __init__(self, allowed_values: Iterable[str] = ()):
        self.allowed_values = set(allowed_values)
        self._tokens: Dict[str, str] = {}

    def redact(self, value: Any, allowed_values: Optional[Iterable[str]] = None) -> Any:
        if value is None or isinstance(value, (bool, int, float)):
            return value
        allowed = self.allowed_values if allowed_values is None else set(allowed_values)
        text = value.text if isinstance(value, ComplexValue) else str(value)
        if text in allowed:
            return value
        if text not in self._tokens:
            self._tokens[text] = f"[redacted{len(self._tokens) + 1}]"
        return self._tokens[text]

    def substitute(self, mapping: Dict[str, Any], allowed_keys: Iterable[str] = (),
                   allowed_values: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """Redact keys not in `allowed_keys` and every value not in the allow list."""
        allowed_keys = set(allowed_keys)
        substituted = {}
        for key, value in mapping.items():
            new_key = key if key in allowed_keys else self.redact(key, ())
            substituted[new_key] = self.redact(value, allowed_values)
        return substituted
