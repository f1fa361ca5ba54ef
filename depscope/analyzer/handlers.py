"""Node handlers: turn single parse-tree nodes into accumulator entries.

A handler never walks children; the SourceFileHandler dispatcher does. Each
handler exposes `get_data(node)` building the usage-site record for a node
and `handle(node, accumulator)` deciding whether to keep it.
"""
import logging
from typing import Generic, Iterable, List, Optional, TypeVar

from tree_sitter import Node

from ..exceptions import NoAttributeExpressionFoundError
from .accumulator import Accumulator
from .adapters import MarkupNodeAdapter, NodeAdapter, ScriptNodeAdapter, node_text, same_node
from .import_parsers import DynamicImportParser, parse_import_statement
from .models import Attribute, FunctionCall, JsxElement, Token, WcElement
from .parser import ParsedFile, get_parser
from .traversal import SourceFileHandler
from .values import get_access_path, get_node_value, index_segment
from .wc_defs import DEFAULT_CDN_DOMAINS, parse_cdn_import

logger = logging.getLogger(__name__)

T = TypeVar('T')

JSX_TAG_PARENTS = {
    'jsx_opening_element',
    'jsx_closing_element',
    'jsx_self_closing_element',
    'nested_identifier',
}

IMPORT_BINDING_PARENTS = {
    'import_clause',
    'import_specifier',
    'namespace_import',
}


def _is_field(parent: Node, field_name: str, node: Node) -> bool:
    return same_node(parent.child_by_field_name(field_name), node)


def _is_covered(start: int, end: int, path: List[str], candidates: Iterable) -> bool:
    """True if an already collected usage spans this range and contains this path."""
    joined = '.'.join(path)
    for existing in candidates:
        if existing.start <= start and existing.end >= end and joined in '.'.join(existing.access_path):
            return True
    return False


class NodeHandler(Generic[T]):
    """Base handler. Subclasses override `handle` and, for usage sites, `get_data`."""

    def __init__(self, parsed_file: ParsedFile):
        self.parsed_file = parsed_file

    def handle(self, node: NodeAdapter, accumulator: Accumulator) -> None:
        raise NotImplementedError

    def get_data(self, node: NodeAdapter) -> T:
        raise NotImplementedError


class ImportNodeHandler(NodeHandler[list]):
    """Static `import ... from '...'` declarations."""

    def handle(self, node, accumulator):
        accumulator.imports.extend(self.get_data(node))

    def get_data(self, node):
        return parse_import_statement(node.raw())


class DynamicImportDeclaratorHandler(NodeHandler[list]):
    """`const {Button} = await import('lib')`."""

    def __init__(self, parsed_file):
        super().__init__(parsed_file)
        self.parser = DynamicImportParser()

    def handle(self, node, accumulator):
        accumulator.imports.extend(self.get_data(node))

    def get_data(self, node):
        return self.parser.parse_declarator(node.raw())


class IdentifierNodeHandler(NodeHandler[Token]):
    """Bare identifiers that are not part of a longer access chain or a binding site."""

    def handle(self, node, accumulator):
        raw = node.raw()
        parent = raw.parent
        if parent is not None:
            if parent.type in IMPORT_BINDING_PARENTS or parent.type in JSX_TAG_PARENTS:
                return
            if parent.type in ('member_expression', 'subscript_expression') and _is_field(parent, 'object', raw):
                return
            if parent.type == 'call_expression' and _is_field(parent, 'function', raw):
                return
            if parent.type == 'variable_declarator' and _is_field(parent, 'name', raw):
                return
            if parent.type == 'pair_pattern':
                return
        accumulator.tokens.append(self.get_data(node))

    def get_data(self, node):
        raw = node.raw()
        name = node_text(raw)
        return Token(name=name, access_path=[name], start=raw.start_byte, end=raw.end_byte)


class AccessExpressionNodeHandler(NodeHandler[Token]):
    """Outermost property (`a.b.c`) and element (`a['b']`) access chains."""

    def handle(self, node, accumulator):
        raw = node.raw()
        parent = raw.parent
        if parent is not None:
            if parent.type == 'subscript_expression' and not _is_field(parent, 'index', raw):
                return
            if parent.type == 'member_expression' and _is_field(parent, 'object', raw):
                return
            if parent.type == 'call_expression' and _is_field(parent, 'function', raw):
                return
            if parent.type in JSX_TAG_PARENTS:
                return

        token = self.get_data(node)
        if _is_covered(token.start, token.end, token.access_path,
                       [*accumulator.functions, *accumulator.tokens]):
            return
        accumulator.tokens.append(token)

    def get_data(self, node):
        raw = node.raw()
        access_path = get_access_path(raw)
        return Token(
            name=access_path[-1] if access_path else node_text(raw),
            access_path=access_path,
            start=raw.start_byte,
            end=raw.end_byte,
        )


class FunctionCallNodeHandler(NodeHandler[FunctionCall]):
    """Call expressions. Also records `import('lib').then(...)` bindings."""

    def __init__(self, parsed_file):
        super().__init__(parsed_file)
        self.dynamic_parser = DynamicImportParser()

    def handle(self, node, accumulator):
        raw = node.raw()
        accumulator.imports.extend(self.dynamic_parser.parse_then_call(raw))

        function = raw.child_by_field_name('function')
        if function is None or function.type == 'import':
            return

        call = self.get_data(node)
        if _is_covered(call.start, call.end, call.access_path, accumulator.functions):
            return
        accumulator.functions.append(call)

    def get_data(self, node):
        raw = node.raw()
        function = raw.child_by_field_name('function')
        if function.type == 'member_expression':
            name = node_text(function.child_by_field_name('property'))
        elif function.type == 'subscript_expression':
            name = index_segment(function.child_by_field_name('index'))
        else:
            name = node_text(function)

        return FunctionCall(
            name=name,
            access_path=get_access_path(raw),
            arguments=self.get_arguments(raw.child_by_field_name('arguments')),
            start=raw.start_byte,
            end=raw.end_byte,
        )

    @staticmethod
    def get_arguments(arguments: Optional[Node]) -> list:
        if arguments is None:
            return []
        if arguments.type != 'arguments':
            # Tagged template: foo`text`
            return [get_node_value(arguments)]
        return [get_node_value(child) for child in arguments.named_children if child.type != 'comment']


class JsxElementNodeHandler(NodeHandler[Optional[JsxElement]]):
    """`<Button kind="primary"/>` and `<Lib.Button>...</Lib.Button>`."""

    def handle(self, node, accumulator):
        element = self.get_data(node, accumulator)
        if element is not None:
            accumulator.elements.append(element)

    @staticmethod
    def _opening(raw: Node) -> Node:
        if raw.type == 'jsx_element':
            for child in raw.named_children:
                if child.type == 'jsx_opening_element':
                    return child
        return raw

    def get_data(self, node, accumulator: Accumulator = None):
        opening = self._opening(node.raw())
        name_node = opening.child_by_field_name('name')
        if name_node is None:
            # Fragment: <>...</>
            return None

        chunks = node_text(name_node).split('.')
        if len(chunks) == 1:
            prefix, name = None, chunks[0]
        else:
            prefix, name = chunks[0], '.'.join(chunks[1:])

        return JsxElement(
            name=name,
            prefix=prefix,
            attributes=self.get_attributes(opening, accumulator),
            raw=node_text(opening),
        )

    def get_attributes(self, opening: Node, accumulator: Accumulator = None) -> List[Attribute]:
        attributes = []
        for child in opening.named_children:
            # Spread attributes ({...props}) have no name and are not collected
            if child.type != 'jsx_attribute':
                continue
            parts = [part for part in child.named_children if part.type != 'comment']
            if not parts:
                continue
            name = node_text(parts[0])
            if len(parts) == 1:
                attributes.append(Attribute(name=name, value=True))
                continue
            try:
                attributes.append(Attribute(name=name, value=get_node_value(parts[1])))
            except NoAttributeExpressionFoundError as e:
                logger.warning("%s: %s", self.parsed_file.path, e)
                if accumulator is not None:
                    accumulator.warnings.append(e)
        return attributes


class HtmlElementNodeHandler(NodeHandler[Optional[WcElement]]):
    """Every tag in an HTML document; matching later keeps the custom elements."""

    def handle(self, node: MarkupNodeAdapter, accumulator):
        element = self.get_data(node)
        if element is not None:
            accumulator.elements.append(element)

    def get_data(self, node: MarkupNodeAdapter):
        name = node.tag_name()
        if not name:
            return None
        return WcElement(
            name=name,
            attributes=[Attribute(name=key, value=value) for key, value in node.attributes()],
        )


class HtmlScriptNodeHandler(NodeHandler[Optional[str]]):
    """`<script>` tags: CDN imports, links to local scripts and inline module imports."""

    INLINE_HANDLERS = {'import_statement': ImportNodeHandler}

    def __init__(self, parsed_file, cdn_domains=DEFAULT_CDN_DOMAINS):
        super().__init__(parsed_file)
        self.cdn_domains = tuple(cdn_domains)

    def handle(self, node: MarkupNodeAdapter, accumulator):
        source = self.get_data(node)
        if source:
            record = parse_cdn_import(source, self.cdn_domains)
            if record is not None:
                accumulator.imports.append(record)
            else:
                accumulator.script_sources.append(source)
            return

        body = node.raw_text()
        if 'import' in body:
            self._collect_inline_imports(body, accumulator)

    def get_data(self, node: MarkupNodeAdapter):
        return node.attribute('src')

    def _collect_inline_imports(self, body: str, accumulator: Accumulator) -> None:
        source = body.encode('utf-8')
        parser = get_parser('javascript')
        inline = ParsedFile(
            path=self.parsed_file.path,
            source=source,
            tree=parser.parse_source(source),
            language=parser.language,
        )
        root = ScriptNodeAdapter(inline.root_node, inline)
        SourceFileHandler(self.INLINE_HANDLERS, inline).visit(root, accumulator)
