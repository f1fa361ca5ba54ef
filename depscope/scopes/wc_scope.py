"""Web-component usage: custom elements in HTML and JSX, including CDN-loaded ones."""
import logging
import os
from functools import partial
from typing import Dict, List, Optional

from ..analyzer.handlers import (
    HtmlElementNodeHandler,
    HtmlScriptNodeHandler,
    ImportNodeHandler,
    JsxElementNodeHandler,
)
from ..analyzer.models import ImportRecord
from ..analyzer.wc_defs import component_name, react_wrapper_for
from .base import AttributedUsage, SourceScope

logger = logging.getLogger(__name__)

HTML_EXTENSIONS = ('.html', '.htm')


def component_of_index(module_path: str) -> Optional[str]:
    """'.../components/button/index.js' -> 'button'; None for other paths."""
    segments = module_path.rstrip('/').split('/')
    if segments[-1] not in ('index.js', 'index') or len(segments) < 2:
        return None
    return segments[-2]


class WcScope(SourceScope):
    """Attribute custom-element tags to side-effect, CDN or JSX wrapper imports.

    HTML files are analyzed after every script file so that a page's
    `<script src="./app.js">` can borrow the imports already found in app.js.
    """

    name = 'wc'
    file_extensions = (
        '.js', '.mjs', '.cjs', '.jsx', '.mjsx', '.cjsx',
        '.tsx', '.mtsx', '.ctsx', *HTML_EXTENSIONS,
    )

    def __init__(self, package, root='.', file_filter=None, config=None,
                 index_map: Dict[str, List[str]] = None):
        super().__init__(package, root=root, file_filter=file_filter, config=config)
        self.index_map = index_map or {}
        self.imports_per_file: Dict[str, List[ImportRecord]] = {}

    def handler_map(self):
        return {
            'import_statement': ImportNodeHandler,
            'jsx_element': JsxElementNodeHandler,
            'jsx_self_closing_element': JsxElementNodeHandler,
            'HtmlElement': HtmlElementNodeHandler,
            'HtmlScript': partial(HtmlScriptNodeHandler, cdn_domains=self.config.cdn_domains),
        }

    def order_files(self, files):
        return sorted(files, key=lambda f: f.path.lower().endswith(HTML_EXTENSIONS))

    def usages(self, accumulator):
        return list(accumulator.elements)

    def resolve_imports(self, source_file, accumulator):
        accumulator.imports = self.resolve_index_imports(accumulator.imports)
        self.imports_per_file[self.absolute_path(source_file.path)] = list(accumulator.imports)
        if accumulator.script_sources:
            accumulator.imports = self.resolve_linked_imports(source_file, accumulator)

    def resolve_index_imports(self, imports: List[ImportRecord]) -> List[ImportRecord]:
        """Replace component `index.js` imports with the side-effect imports they contain."""
        if not self.index_map:
            return imports

        resolved = []
        for record in imports:
            component = component_of_index(record.path) if record.is_side_effect else None
            index_imports = self.index_map.get(component) if component else None
            if not index_imports:
                resolved.append(record)
                continue
            logger.debug("Expanding %s into %d imports", record.path, len(index_imports))
            for import_path in index_imports:
                resolved.append(ImportRecord(
                    name=component_name(import_path),
                    path=record.path,
                    is_side_effect=True,
                    prefix=record.prefix,
                ))
        return resolved

    def resolve_linked_imports(self, source_file, accumulator) -> List[ImportRecord]:
        """Imports of the file plus those of every local script it links to."""
        merged = list(accumulator.imports)
        base_dir = os.path.dirname(self.absolute_path(source_file.path))
        for script_source in accumulator.script_sources:
            if script_source.startswith('/'):
                linked_path = os.path.normpath(os.path.join(self.root, script_source.lstrip('/')))
            else:
                linked_path = os.path.normpath(os.path.join(base_dir, script_source))
            linked_imports = self.imports_per_file.get(linked_path)
            if linked_imports:
                logger.debug("%s links %s (%d imports)", source_file.path, script_source, len(linked_imports))
                merged.extend(linked_imports)
        return merged

    def collect(self, source_file, accumulator):
        # Plain JSX components belong to the jsx scope unless they wrap a web component
        return [
            attributed for attributed in super().collect(source_file, accumulator)
            if attributed.kind != 'jsx' or attributed.usage.is_custom_element or attributed.framework_wrapper
        ]

    def attribute(self, source_file, usage, record):
        wrapper = None
        if usage.kind == 'jsx':
            wrapper = react_wrapper_for(record, self.package.name)
        return AttributedUsage(file=source_file.path, usage=usage, import_record=record,
                               framework_wrapper=wrapper)
