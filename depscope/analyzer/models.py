"""Records produced while analyzing a source file.

Import records are plain values. Usage sites keep identity semantics
(`eq=False`) because the same access path can legitimately occur several
times in one file and each occurrence is attributed on its own.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional


class ImportForm(str, Enum):
    """The mutually exclusive shapes an import binding can take."""
    DEFAULT = 'default'
    NAMED = 'named'
    RENAMED = 'renamed'
    ALL = 'all'
    SIDE_EFFECT = 'side-effect'
    CDN = 'cdn'


@dataclass(frozen=True)
class ImportRecord:
    """One binding introduced by an import declaration or a CDN script tag."""
    name: str
    path: str
    is_default: bool = False
    is_all: bool = False
    is_side_effect: bool = False
    rename: Optional[str] = None
    prefix: Optional[str] = None
    package: Optional[str] = None  # CDN only
    version: Optional[str] = None  # CDN only

    @property
    def is_cdn(self) -> bool:
        return self.package is not None

    @property
    def form(self) -> ImportForm:
        if self.is_cdn:
            return ImportForm.CDN
        if self.is_side_effect:
            return ImportForm.SIDE_EFFECT
        if self.is_all:
            return ImportForm.ALL
        if self.is_default:
            return ImportForm.DEFAULT
        if self.rename is not None:
            return ImportForm.RENAMED
        return ImportForm.NAMED

    def as_dict(self) -> dict:
        data = {
            'name': self.name,
            'path': self.path,
            'form': self.form.value,
        }
        for key in ('rename', 'prefix', 'package', 'version'):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass(frozen=True)
class ComplexValue:
    """A value that cannot be reduced to a literal; keeps the raw source text."""
    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Attribute:
    """Attribute of a JSX or custom element."""
    name: str
    value: Any


@dataclass(eq=False)
class Token:
    """Bare identifier or property/element access chain."""
    name: str
    access_path: List[str]
    start: int = 0
    end: int = 0

    kind = 'token'


@dataclass(eq=False)
class FunctionCall:
    """A call expression and its literal-or-complex arguments."""
    name: str
    access_path: List[str]
    arguments: List[Any] = field(default_factory=list)
    start: int = 0
    end: int = 0

    kind = 'function'


@dataclass(eq=False)
class JsxElement:
    """A JSX tag. `<Lib.Button>` has prefix 'Lib' and name 'Button'."""
    name: str
    prefix: Optional[str] = None
    attributes: List[Attribute] = field(default_factory=list)
    raw: str = ''

    kind = 'jsx'

    @property
    def access_path(self) -> List[str]:
        if self.prefix is None:
            return self.name.split('.')
        return [self.prefix] + self.name.split('.')

    @property
    def is_custom_element(self) -> bool:
        return self.prefix is None and '-' in self.name


@dataclass(eq=False)
class WcElement:
    """A tag found in HTML markup."""
    name: str
    attributes: List[Attribute] = field(default_factory=list)

    kind = 'wc'

    @property
    def access_path(self) -> List[str]:
        return [self.name]

    @property
    def is_custom_element(self) -> bool:
        return '-' in self.name


@dataclass(frozen=True)
class PackageData:
    """Name and version of an npm package."""
    name: str
    version: Optional[str] = None


@dataclass
class InstallingPackage:
    """A package in the dependency tree together with its direct dependencies."""
    name: Optional[str]
    version: Optional[str]
    dependencies: List[PackageData] = field(default_factory=list)
