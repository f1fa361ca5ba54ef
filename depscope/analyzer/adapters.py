"""Uniform node view over script (JS/TS/TSX) and markup (HTML) parse trees.

Handlers and the traversal dispatcher only talk to NodeAdapter, so one
dispatcher serves both grammars. The adapter for a file is chosen by looking
at the shape of the parsed root, not at the file extension.
"""
from typing import Iterator, List, Optional, Tuple
from tree_sitter import Node

from ..exceptions import UnsupportedFileTypeError
from .parser import ParsedFile

SCRIPT_ROOT_TYPES = {'program'}
MARKUP_ROOT_TYPES = {'document', 'fragment'}

HTML_SCRIPT_KIND = 'HtmlScript'
HTML_ELEMENT_KIND = 'HtmlElement'


def node_text(node: Node) -> str:
    """Decode the source text spanned by a tree-sitter node."""
    return node.text.decode('utf-8', errors='replace') if node.text is not None else ''


def same_node(a: Optional[Node], b: Optional[Node]) -> bool:
    """Positional identity check for tree-sitter nodes."""
    if a is None or b is None:
        return False
    return (a.start_byte, a.end_byte, a.type) == (b.start_byte, b.end_byte, b.type)


class NodeAdapter:
    """Grammar-neutral view of a parse-tree node."""

    def __init__(self, node: Node, parsed_file: ParsedFile):
        self._node = node
        self.parsed_file = parsed_file

    def kind(self) -> str:
        return self._node.type

    def children(self) -> Iterator['NodeAdapter']:
        """Lazily yield child adapters in source order. Restartable per call."""
        for child in self._node.children:
            yield self.__class__(child, self.parsed_file)

    def raw(self) -> Node:
        return self._node

    def text(self) -> str:
        return node_text(self._node)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.kind()!r})"


class ScriptNodeAdapter(NodeAdapter):
    """Adapter for the javascript, typescript and tsx grammars."""


class MarkupNodeAdapter(NodeAdapter):
    """Adapter for the html grammar.

    Elements report the 'HtmlElement' kind and script elements the
    'HtmlScript' kind; everything else keeps its grammar node type.
    """

    def kind(self) -> str:
        node_type = self._node.type
        if node_type == 'script_element':
            return HTML_SCRIPT_KIND
        if node_type == 'element':
            return HTML_ELEMENT_KIND
        return node_type

    def _tag_node(self) -> Optional[Node]:
        for child in self._node.children:
            if child.type in ('start_tag', 'self_closing_tag'):
                return child
        return None

    def tag_name(self) -> str:
        """Lower-cased tag name, or '' when the node has no opening tag."""
        tag = self._tag_node()
        if tag is None:
            return ''
        for child in tag.children:
            if child.type == 'tag_name':
                return node_text(child).lower()
        return ''

    def attributes(self) -> List[Tuple[str, str]]:
        """Attribute (name, value) pairs in source order.

        Boolean attributes such as `disabled` have the value ''.
        """
        tag = self._tag_node()
        if tag is None:
            return []

        pairs = []
        for attribute in tag.children:
            if attribute.type != 'attribute':
                continue
            name = ''
            value = ''
            for part in attribute.children:
                if part.type == 'attribute_name':
                    name = node_text(part)
                elif part.type == 'attribute_value':
                    value = node_text(part)
                elif part.type == 'quoted_attribute_value':
                    value = ''.join(
                        node_text(inner) for inner in part.children
                        if inner.type == 'attribute_value'
                    )
            if name:
                pairs.append((name, value))
        return pairs

    def attribute(self, name: str) -> Optional[str]:
        for attribute_name, value in self.attributes():
            if attribute_name == name:
                return value
        return None

    def raw_text(self) -> str:
        """Body of a script element, '' when it has none."""
        for child in self._node.children:
            if child.type == 'raw_text':
                return node_text(child)
        return ''


def create_node_adapter(parsed_file: ParsedFile) -> NodeAdapter:
    """Wrap the root of a parsed file in the adapter matching its shape.

    Raises:
        UnsupportedFileTypeError: If the root is neither a script nor a markup root
    """
    root = parsed_file.root_node
    if root.type in SCRIPT_ROOT_TYPES:
        return ScriptNodeAdapter(root, parsed_file)
    if root.type in MARKUP_ROOT_TYPES:
        return MarkupNodeAdapter(root, parsed_file)
    raise UnsupportedFileTypeError(parsed_file.path, root.type)
