"""Scope orchestration: parse, traverse, match and filter a set of source files."""
import logging
import os
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Type

from ..analyzer.accumulator import Accumulator, UsageSite
from ..analyzer.matchers import ImportMatcher, find_import, matchers_for
from ..analyzer.models import ImportRecord, PackageData
from ..analyzer.parser import SourceFile, parse_source_file
from ..analyzer.traversal import process_file
from ..config import Config, get_config
from ..exceptions import DepscopeError

logger = logging.getLogger(__name__)

FileFilter = Callable[[SourceFile], bool]


def is_instrumented_import(record: ImportRecord, package_name: str) -> bool:
    """True if the record imports `package_name` itself or one of its sub-paths."""
    if record.is_cdn:
        return record.package == package_name
    return record.path == package_name or record.path.startswith(package_name + '/')


@dataclass
class AttributedUsage:
    """A usage site together with the instrumented import it was attributed to."""
    file: str
    usage: UsageSite
    import_record: ImportRecord
    framework_wrapper: Optional[str] = None

    @property
    def kind(self) -> str:
        return self.usage.kind

    @property
    def canonical_name(self) -> str:
        """Usage name with a renamed local binding replaced by the exported name."""
        path = list(self.usage.access_path)
        record = self.import_record
        if record.rename is not None and path and path[0] == record.rename:
            path[0] = record.name
        return '.'.join(path)

    def as_dict(self) -> dict:
        """Plain representation for reports, with the true captured values."""
        data = {
            'file': self.file,
            'kind': self.kind,
            'name': self.canonical_name,
            'import': self.import_record.as_dict(),
        }
        if hasattr(self.usage, 'attributes'):
            data['attributes'] = {attr.name: _plain(attr.value) for attr in self.usage.attributes}
        if hasattr(self.usage, 'arguments'):
            data['arguments'] = [_plain(argument) for argument in self.usage.arguments]
        if self.framework_wrapper is not None:
            data['framework_wrapper'] = self.framework_wrapper
        return data


def _plain(value):
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return str(value)


@dataclass
class FileFailure:
    """A file that could not be analyzed, with the reason."""
    file: str
    error: Exception

    def __str__(self) -> str:
        return f"{self.file}: {self.error}"


@dataclass
class ScopeResult:
    scope: str
    usages: List[AttributedUsage] = field(default_factory=list)
    failures: List[FileFailure] = field(default_factory=list)
    warnings: List[FileFailure] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


class Scope:
    """One analysis pass over the project for an instrumented package."""

    name: str = None

    def __init__(self, package: PackageData, config: Config = None):
        self.package = package
        self.config = config or get_config()


class SourceScope(Scope):
    """Scope that attributes usage sites found in source files.

    Subclasses provide `handler_map()` and `usages(accumulator)`; they may
    override `matchers_for` and the `resolve_imports` hook.
    """

    file_extensions: Sequence[str] = ()

    def __init__(self, package: PackageData, root: str = '.', file_filter: FileFilter = None,
                 config: Config = None):
        super().__init__(package, config)
        self.root = os.path.normpath(os.path.abspath(root))
        self.file_filter = file_filter

    def handler_map(self) -> Dict[str, Type]:
        raise NotImplementedError

    def usages(self, accumulator: Accumulator) -> List[UsageSite]:
        raise NotImplementedError

    def matchers_for(self, usage: UsageSite) -> Sequence[ImportMatcher]:
        return matchers_for(usage)

    def resolve_imports(self, source_file: SourceFile, accumulator: Accumulator) -> None:
        """Hook run between traversal and matching."""

    def accepts(self, source_file: SourceFile) -> bool:
        return os.path.splitext(source_file.path)[1].lower() in self.file_extensions

    def order_files(self, files: Iterable[SourceFile]) -> List[SourceFile]:
        return list(files)

    def absolute_path(self, path: str) -> str:
        return os.path.normpath(os.path.join(self.root, path))

    def run(self, files: Iterable[SourceFile]) -> ScopeResult:
        """Analyze every accepted file; a failing file never stops the others."""
        result = ScopeResult(self.name)
        for source_file in self.order_files(f for f in files if self.accepts(f)):
            try:
                if self.file_filter is not None and not self.file_filter(source_file):
                    result.skipped.append(source_file.path)
                    continue
                accumulator = self.analyze_file(source_file)
            except Exception as e:
                # Failures stay with the file that caused them
                logger.warning("Skipping %s: %s", source_file.path, e, exc_info=not isinstance(e, DepscopeError))
                result.failures.append(FileFailure(source_file.path, e))
                continue

            result.warnings.extend(FileFailure(source_file.path, w) for w in accumulator.warnings)
            result.usages.extend(self.collect(source_file, accumulator))

        logger.info("Scope %s: %d usages in %d files, %d failures",
                    self.name, len(result.usages), len({u.file for u in result.usages}),
                    len(result.failures))
        return result

    def analyze_file(self, source_file: SourceFile) -> Accumulator:
        """Parse, traverse and match one file.

        Raises:
            UnsupportedFileTypeError: If the parsed root has an unknown shape
        """
        accumulator = Accumulator()
        parsed_file = parse_source_file(source_file)
        process_file(accumulator, parsed_file, self.handler_map())
        self.resolve_imports(source_file, accumulator)

        for usage in self.usages(accumulator):
            record = find_import(usage, accumulator.imports, self.matchers_for(usage))
            if record is not None:
                accumulator.usage_imports[usage] = record
        return accumulator

    def collect(self, source_file: SourceFile, accumulator: Accumulator) -> List[AttributedUsage]:
        """Attributed usages whose import resolves to the instrumented package."""
        collected = []
        for usage, record in accumulator.usage_imports.items():
            if is_instrumented_import(record, self.package.name):
                collected.append(self.attribute(source_file, usage, record))
        return collected

    def attribute(self, source_file: SourceFile, usage: UsageSite, record: ImportRecord) -> AttributedUsage:
        return AttributedUsage(file=source_file.path, usage=usage, import_record=record)
