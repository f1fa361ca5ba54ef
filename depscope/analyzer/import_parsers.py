"""Turn import declarations into normalized ImportRecords, one parser per form."""
from typing import List, Optional

from tree_sitter import Node

from .adapters import node_text
from .models import ImportRecord
from .wc_defs import component_name, get_wc_prefix

DEFAULT_EXPORT = 'default'


def strip_quotes(text: str) -> str:
    return text.strip('"\'`')


def module_specifier(import_node: Node) -> Optional[str]:
    """Module path of an import statement with its quotes removed."""
    source = import_node.child_by_field_name('source')
    if source is None:
        return None
    return strip_quotes(node_text(source))


def import_clause(import_node: Node) -> Optional[Node]:
    for child in import_node.named_children:
        if child.type == 'import_clause':
            return child
    return None


def import_specifiers(import_node: Node) -> List[Node]:
    clause = import_clause(import_node)
    if clause is None:
        return []
    specifiers = []
    for child in clause.named_children:
        if child.type == 'named_imports':
            specifiers.extend(
                spec for spec in child.named_children if spec.type == 'import_specifier'
            )
    return specifiers


def _specifier_names(specifier: Node):
    name = specifier.child_by_field_name('name')
    alias = specifier.child_by_field_name('alias')
    exported = strip_quotes(node_text(name)) if name is not None else ''
    local = node_text(alias) if alias is not None else None
    return exported, local


class ImportParser:
    """Base class: `parse(import_node, module_path)` returns zero or more records."""

    def parse(self, import_node: Node, module_path: str) -> List[ImportRecord]:
        raise NotImplementedError


class DefaultImportParser(ImportParser):
    """`import Button from 'lib'` and `import {default as Button} from 'lib'`."""

    def parse(self, import_node: Node, module_path: str) -> List[ImportRecord]:
        records = []
        clause = import_clause(import_node)
        if clause is None:
            return records

        for child in clause.named_children:
            if child.type == 'identifier':
                records.append(ImportRecord(name=node_text(child), path=module_path, is_default=True))

        for specifier in import_specifiers(import_node):
            exported, local = _specifier_names(specifier)
            if exported == DEFAULT_EXPORT and local is not None:
                records.append(ImportRecord(name=local, path=module_path, is_default=True))
        return records


class NamedImportParser(ImportParser):
    """`import {Button, Tile} from 'lib'`."""

    def parse(self, import_node: Node, module_path: str) -> List[ImportRecord]:
        records = []
        for specifier in import_specifiers(import_node):
            exported, local = _specifier_names(specifier)
            if local is None:
                records.append(ImportRecord(name=exported, path=module_path))
        return records


class RenamedImportParser(ImportParser):
    """`import {Slug as MySlug} from 'lib'`. `default as X` is a default import, not a rename."""

    def parse(self, import_node: Node, module_path: str) -> List[ImportRecord]:
        records = []
        for specifier in import_specifiers(import_node):
            exported, local = _specifier_names(specifier)
            if local is not None and exported != DEFAULT_EXPORT:
                records.append(ImportRecord(name=exported, path=module_path, rename=local))
        return records


class AllImportParser(ImportParser):
    """`import * as Lib from 'lib'`."""

    def parse(self, import_node: Node, module_path: str) -> List[ImportRecord]:
        clause = import_clause(import_node)
        if clause is None:
            return []
        records = []
        for child in clause.named_children:
            if child.type != 'namespace_import':
                continue
            for part in child.named_children:
                if part.type == 'identifier':
                    records.append(ImportRecord(name=node_text(part), path=module_path, is_all=True))
        return records


class SideEffectImportParser(ImportParser):
    """`import '@carbon/web-components/es/components/button/button.js'`.

    The record is named after the imported file so that custom-element tags
    (`<cds-button>`) can be matched against it through the package prefix.
    """

    def parse(self, import_node: Node, module_path: str) -> List[ImportRecord]:
        if import_clause(import_node) is not None:
            return []
        return [ImportRecord(
            name=component_name(module_path),
            path=module_path,
            is_side_effect=True,
            prefix=get_wc_prefix(module_path),
        )]


STATIC_IMPORT_PARSERS = (
    AllImportParser(),
    DefaultImportParser(),
    NamedImportParser(),
    RenamedImportParser(),
    SideEffectImportParser(),
)


def parse_import_statement(import_node: Node) -> List[ImportRecord]:
    """Run every static import parser over one `import_statement` node."""
    module_path = module_specifier(import_node)
    if module_path is None:
        return []
    records = []
    for parser in STATIC_IMPORT_PARSERS:
        records.extend(parser.parse(import_node, module_path))
    return records


# Dynamic imports with a literal specifier

def dynamic_import_path(node: Optional[Node]) -> Optional[str]:
    """Module path of `import('x')` or `await import('x')`, None otherwise."""
    if node is None:
        return None
    if node.type == 'await_expression':
        inner = [child for child in node.named_children if child.type != 'comment']
        return dynamic_import_path(inner[0]) if inner else None
    if node.type != 'call_expression':
        return None
    function = node.child_by_field_name('function')
    if function is None or function.type != 'import':
        return None
    arguments = node.child_by_field_name('arguments')
    if arguments is None:
        return None
    values = [child for child in arguments.named_children if child.type != 'comment']
    if len(values) != 1 or values[0].type != 'string':
        return None
    return strip_quotes(node_text(values[0]))


def _unwrap_parameter(node: Node) -> Node:
    # TypeScript wraps parameters in required_parameter/optional_parameter
    if node.type in ('required_parameter', 'optional_parameter'):
        pattern = node.child_by_field_name('pattern')
        if pattern is not None:
            return pattern
    return node


class DynamicImportParser:
    """Bindings made from the namespace object of a literal dynamic import.

    `const {Button, Tile: MyTile} = await import('lib')` binds named and
    renamed records; `const Lib = await import('lib')` binds the namespace
    like `import * as Lib`; `{default: Button}` is a default record.
    """

    def parse_pattern(self, pattern: Node, module_path: str) -> List[ImportRecord]:
        pattern = _unwrap_parameter(pattern)
        if pattern.type == 'identifier':
            return [ImportRecord(name=node_text(pattern), path=module_path, is_all=True)]
        if pattern.type != 'object_pattern':
            return []

        records = []
        for child in pattern.named_children:
            if child.type == 'shorthand_property_identifier_pattern':
                records.append(ImportRecord(name=node_text(child), path=module_path))
            elif child.type == 'object_assignment_pattern':
                left = child.child_by_field_name('left')
                if left is not None:
                    records.append(ImportRecord(name=node_text(left), path=module_path))
            elif child.type == 'pair_pattern':
                key = child.child_by_field_name('key')
                value = child.child_by_field_name('value')
                if key is None or value is None:
                    continue
                if value.type == 'assignment_pattern':
                    value = value.child_by_field_name('left') or value
                if value.type != 'identifier':
                    continue
                exported = strip_quotes(node_text(key))
                if exported == DEFAULT_EXPORT:
                    records.append(ImportRecord(name=node_text(value), path=module_path, is_default=True))
                else:
                    records.append(ImportRecord(name=exported, path=module_path, rename=node_text(value)))
        return records

    def parse_declarator(self, declarator: Node) -> List[ImportRecord]:
        """`const <pattern> = await import('x')`."""
        module_path = dynamic_import_path(declarator.child_by_field_name('value'))
        name = declarator.child_by_field_name('name')
        if module_path is None or name is None:
            return []
        return self.parse_pattern(name, module_path)

    def parse_then_call(self, call: Node) -> List[ImportRecord]:
        """`import('x').then((<pattern>) => ...)`."""
        function = call.child_by_field_name('function')
        if function is None or function.type != 'member_expression':
            return []
        prop = function.child_by_field_name('property')
        if prop is None or node_text(prop) != 'then':
            return []
        module_path = dynamic_import_path(function.child_by_field_name('object'))
        if module_path is None:
            return []

        arguments = call.child_by_field_name('arguments')
        callbacks = [child for child in arguments.named_children
                     if child.type in ('arrow_function', 'function_expression', 'function')]
        if not callbacks:
            return []
        callback = callbacks[0]

        single = callback.child_by_field_name('parameter')
        if single is not None:
            return self.parse_pattern(single, module_path)
        parameters = callback.child_by_field_name('parameters')
        if parameters is None:
            return []
        params = [child for child in parameters.named_children if child.type != 'comment']
        if not params:
            return []
        return self.parse_pattern(params[0], module_path)
