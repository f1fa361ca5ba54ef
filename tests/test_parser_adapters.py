"""Tests for grammar selection, parsing and the node adapters."""
from types import SimpleNamespace

import pytest

from depscope.analyzer.adapters import (
    HTML_ELEMENT_KIND,
    HTML_SCRIPT_KIND,
    MarkupNodeAdapter,
    ScriptNodeAdapter,
    create_node_adapter,
)
from depscope.analyzer.parser import LanguageParser, ParsedFile
from depscope.exceptions import UnsupportedFileTypeError

from conftest import parse_code


class TestLanguageParser:

    @pytest.mark.parametrize('path,language', [
        ('src/app.js', 'javascript'),
        ('src/app.mjs', 'javascript'),
        ('src/App.jsx', 'javascript'),
        ('src/util.ts', 'typescript'),
        ('src/App.tsx', 'tsx'),
        ('public/index.HTML', 'html'),
    ])
    def test_detect_language(self, path, language):
        assert LanguageParser.detect_language(path) == language

    def test_unknown_extension(self):
        assert LanguageParser.detect_language('README.md') is None
        assert LanguageParser.for_path('README.md') is None

    def test_unsupported_language_raises(self):
        with pytest.raises(ValueError, match="Unsupported language"):
            LanguageParser('python')

    def test_parse_source_accepts_str(self):
        tree = LanguageParser('javascript').parse_source("const a = 1;")
        assert tree.root_node.type == 'program'


class TestCreateNodeAdapter:

    def test_script_root(self):
        adapter = create_node_adapter(parse_code("import a from 'b'", 'a.js'))
        assert isinstance(adapter, ScriptNodeAdapter)
        assert adapter.kind() == 'program'

    def test_tsx_root(self):
        adapter = create_node_adapter(parse_code("const x = <Button />", 'a.tsx'))
        assert isinstance(adapter, ScriptNodeAdapter)

    def test_markup_root(self):
        adapter = create_node_adapter(parse_code("<div><cds-button></cds-button></div>", 'a.html'))
        assert isinstance(adapter, MarkupNodeAdapter)

    def test_unknown_root_is_unsupported(self):
        fake_tree = SimpleNamespace(root_node=SimpleNamespace(type='module'))
        parsed = ParsedFile(path='x.py', source=b'', tree=fake_tree, language='python')

        with pytest.raises(UnsupportedFileTypeError) as excinfo:
            create_node_adapter(parsed)
        assert 'x.py' in str(excinfo.value)

    def test_children_are_restartable(self):
        adapter = create_node_adapter(parse_code("a; b; c;", 'a.js'))
        first = [child.kind() for child in adapter.children()]
        second = [child.kind() for child in adapter.children()]
        assert first == second
        assert first == ['expression_statement'] * 3


class TestMarkupNodeAdapter:

    def _children_by_kind(self, adapter, kind):
        found = []
        stack = [adapter]
        while stack:
            node = stack.pop()
            if node.kind() == kind:
                found.append(node)
            stack.extend(node.children())
        return found

    def test_script_and_element_kinds(self):
        html = '<script src="./app.js"></script><cds-button kind="primary" disabled>Go</cds-button>'
        root = create_node_adapter(parse_code(html, 'index.html'))

        scripts = self._children_by_kind(root, HTML_SCRIPT_KIND)
        elements = self._children_by_kind(root, HTML_ELEMENT_KIND)

        assert len(scripts) == 1
        assert scripts[0].attribute('src') == './app.js'
        assert [element.tag_name() for element in elements] == ['cds-button']
        assert elements[0].attributes() == [('kind', 'primary'), ('disabled', '')]

    def test_inline_script_body(self):
        html = "<script type=\"module\">import 'x';</script>"
        root = create_node_adapter(parse_code(html, 'index.html'))
        script = self._children_by_kind(root, HTML_SCRIPT_KIND)[0]
        assert "import 'x';" in script.raw_text()
        assert script.attribute('src') is None
