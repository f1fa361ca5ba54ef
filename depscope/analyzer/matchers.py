"""Map a usage site back to the import record that introduced its root binding.

Each matcher handles one import form. Imports are scanned last-to-first so
that when a file binds the same local name twice, the later declaration
shadows the earlier one.
"""
from typing import Optional, Sequence

from .accumulator import UsageSite
from .models import ImportForm, ImportRecord


def _latest(imports: Sequence[ImportRecord]):
    return reversed(imports)


class ImportMatcher:
    """Base matcher; `find_match` returns the matching record or None."""

    form: ImportForm = None

    def find_match(self, usage: UsageSite, imports: Sequence[ImportRecord]) -> Optional[ImportRecord]:
        for record in _latest(imports):
            if record.form is self.form and self.matches(usage, record):
                return record
        return None

    def matches(self, usage: UsageSite, record: ImportRecord) -> bool:
        raise NotImplementedError


class AllImportMatcher(ImportMatcher):
    """`Lib.Button` against `import * as Lib`. The bare namespace never matches."""

    form = ImportForm.ALL

    def matches(self, usage, record):
        path = usage.access_path
        return len(path) >= 2 and path[0] == record.name


class NamedImportMatcher(ImportMatcher):
    form = ImportForm.NAMED

    def matches(self, usage, record):
        path = usage.access_path
        return bool(path) and path[0] == record.name


class RenamedImportMatcher(ImportMatcher):
    """`MySlug` against `import {Slug as MySlug}`."""

    form = ImportForm.RENAMED

    def matches(self, usage, record):
        path = usage.access_path
        return bool(path) and path[0] == record.rename


class DefaultImportMatcher(ImportMatcher):
    """`Button` or `<Button.Item/>` against `import Button from 'lib'`."""

    form = ImportForm.DEFAULT

    def matches(self, usage, record):
        path = usage.access_path
        return bool(path) and path[0] == record.name


class _CustomElementMatcher(ImportMatcher):

    def matches(self, usage, record):
        tag = usage.name
        if tag == record.name:
            return True
        return record.prefix is not None and tag == f"{record.prefix}-{record.name}"


class SideEffectImportMatcher(_CustomElementMatcher):
    """`<cds-button>` against `import '@carbon/web-components/es/components/button/button.js'`."""

    form = ImportForm.SIDE_EFFECT


class CdnImportMatcher(_CustomElementMatcher):
    """`<cds-button>` against a CDN `<script src=".../button.min.js">`."""

    form = ImportForm.CDN


BINDING_MATCHERS = (
    NamedImportMatcher(),
    RenamedImportMatcher(),
    AllImportMatcher(),
    DefaultImportMatcher(),
)

CUSTOM_ELEMENT_MATCHERS = (
    CdnImportMatcher(),
    SideEffectImportMatcher(),
)


def matchers_for(usage: UsageSite) -> Sequence[ImportMatcher]:
    """Matchers to try for a usage site, in order."""
    if getattr(usage, 'is_custom_element', False):
        return CUSTOM_ELEMENT_MATCHERS
    return BINDING_MATCHERS


def find_import(usage: UsageSite, imports: Sequence[ImportRecord],
                matchers: Optional[Sequence[ImportMatcher]] = None) -> Optional[ImportRecord]:
    """Return the import record `usage` is attributed to, or None.

    Declarations are tried newest first and, for each one, the matchers in
    their usage-specific order, so a later binding of the same local name
    shadows an earlier one whatever their import forms.
    """
    if matchers is None:
        matchers = matchers_for(usage)
    for record in _latest(imports):
        for matcher in matchers:
            if record.form is matcher.form and matcher.matches(usage, record):
                return record
    return None

