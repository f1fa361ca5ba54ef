"""Tree-sitter parser for the script and markup grammars depscope analyzes."""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from tree_sitter import Language, Parser, Tree
import tree_sitter_html as tshtml
import tree_sitter_javascript as tsjavascript
import tree_sitter_typescript as tstypescript


@dataclass
class SourceFile:
    """Raw file contents plus the language detected for them."""
    path: str
    content: bytes
    language: str


@dataclass
class ParsedFile:
    """A source file together with its tree-sitter parse tree."""
    path: str
    source: bytes
    tree: Tree
    language: str

    @property
    def root_node(self):
        return self.tree.root_node


class LanguageParser:
    """Multi-grammar parser using the tree-sitter v0.22+ API."""

    SUPPORTED_LANGUAGES = {
        '.js': 'javascript',
        '.mjs': 'javascript',
        '.cjs': 'javascript',
        '.jsx': 'javascript',
        '.mjsx': 'javascript',
        '.cjsx': 'javascript',
        '.ts': 'typescript',
        '.mts': 'typescript',
        '.cts': 'typescript',
        '.tsx': 'tsx',
        '.mtsx': 'tsx',
        '.ctsx': 'tsx',
        '.html': 'html',
        '.htm': 'html',
    }

    def __init__(self, language: str):
        """Initialize parser for given language (javascript, typescript, tsx, html).

        Args:
            language: One of 'javascript', 'typescript', 'tsx', 'html'

        Raises:
            ValueError: If language is not supported
        """
        self.language = language
        self.parser = self._create_parser()

    def _create_parser(self) -> Parser:
        """Build a Parser bound to the grammar for self.language.

        Returns:
            Configured Parser instance

        Raises:
            ValueError: If language is not supported
        """
        if self.language == 'javascript':
            lang = Language(tsjavascript.language())
        elif self.language == 'typescript':
            lang = Language(tstypescript.language_typescript())
        elif self.language == 'tsx':
            lang = Language(tstypescript.language_tsx())
        elif self.language == 'html':
            lang = Language(tshtml.language())
        else:
            raise ValueError(f"Unsupported language: {self.language}")

        return Parser(lang)

    def parse_source(self, source_code: str | bytes) -> Tree:
        """Parse in-memory source code.

        Args:
            source_code: Source text; str input is encoded as UTF-8

        Returns:
            Parsed Tree object
        """
        if isinstance(source_code, str):
            source_code = source_code.encode('utf-8')
        return self.parser.parse(source_code)

    def parse(self, source_file: SourceFile) -> ParsedFile:
        """Parse a SourceFile supplied by the file discovery layer."""
        tree = self.parse_source(source_file.content)
        return ParsedFile(
            path=source_file.path,
            source=source_file.content,
            tree=tree,
            language=self.language,
        )

    @classmethod
    def detect_language(cls, file_path: str | Path) -> Optional[str]:
        """Return the grammar name for a file path, or None if unsupported."""
        return cls.SUPPORTED_LANGUAGES.get(Path(file_path).suffix.lower())

    @classmethod
    def for_path(cls, file_path: str | Path) -> Optional['LanguageParser']:
        """Create parser based on file extension.

        Args:
            file_path: Path to determine language from

        Returns:
            LanguageParser instance, or None if extension not supported
        """
        language = cls.detect_language(file_path)
        if language:
            return cls(language)
        return None


_PARSERS: dict[str, LanguageParser] = {}


def get_parser(language: str) -> LanguageParser:
    """Return a shared LanguageParser for a grammar, creating it on first use."""
    if language not in _PARSERS:
        _PARSERS[language] = LanguageParser(language)
    return _PARSERS[language]


def parse_source_file(source_file: SourceFile) -> ParsedFile:
    """Parse a SourceFile with the grammar named by its language."""
    return get_parser(source_file.language).parse(source_file)
