"""Shared fixtures for depscope tests."""
import json
from pathlib import Path

import pytest

from depscope.analyzer.accumulator import Accumulator
from depscope.analyzer.parser import LanguageParser, ParsedFile, SourceFile
from depscope.analyzer.traversal import process_file

FIXTURES_DIR = Path(__file__).parent / 'fixtures'


def make_source(code: str, path: str = 'test.tsx', language: str = None) -> SourceFile:
    """SourceFile for inline code, language detected from the path by default."""
    return SourceFile(
        path=path,
        content=code.encode('utf-8'),
        language=language or LanguageParser.detect_language(path),
    )


def parse_code(code: str, path: str = 'test.tsx') -> ParsedFile:
    source = make_source(code, path)
    return LanguageParser(source.language).parse(source)


def collect(code: str, handler_map, path: str = 'test.tsx') -> Accumulator:
    """Traverse inline code with `handler_map` and return the filled accumulator."""
    accumulator = Accumulator()
    process_file(accumulator, parse_code(code, path), handler_map)
    return accumulator


@pytest.fixture
def fixture_source():
    """Load a fixture file as a SourceFile with a path relative to the fixtures dir."""
    def load(relative_path: str) -> SourceFile:
        path = FIXTURES_DIR / relative_path
        return SourceFile(
            path=relative_path,
            content=path.read_bytes(),
            language=LanguageParser.detect_language(path),
        )
    return load


@pytest.fixture
def basic_tree():
    with open(FIXTURES_DIR / 'dependency-trees' / 'basic-dependency-tree.json') as f:
        return json.load(f)


@pytest.fixture
def config(monkeypatch, tmp_path):
    """Config isolated from the developer's environment and .env file."""
    from depscope.config import Config
    for name in ('DEPSCOPE_CDN_DOMAINS', 'DEPSCOPE_LOG_LEVEL', 'DEPSCOPE_EXCLUDED_DIRS',
                 'DEPSCOPE_ALLOWED_ATTRIBUTE_NAMES', 'DEPSCOPE_ALLOWED_ATTRIBUTE_VALUES',
                 'DEPSCOPE_ALLOWED_ARGUMENT_VALUES'):
        monkeypatch.delenv(name, raising=False)
    return Config(env_path=tmp_path / '.env')
