"""Depth-first traversal that dispatches nodes to kind-specific handlers."""
import logging
from typing import Dict, Type

from .accumulator import Accumulator
from .adapters import NodeAdapter, create_node_adapter
from .parser import ParsedFile

logger = logging.getLogger(__name__)

HandlerMap = Dict[str, Type['NodeHandler']]


class SourceFileHandler:
    """Walk a parsed file and feed every node to the handler registered for its kind.

    The dispatcher owns the walk: handlers only read the node they are given
    and mutate the accumulator, they never descend on their own. Children are
    visited in source order, which fixes the order of `accumulator.imports`.
    """

    def __init__(self, handler_map: HandlerMap, parsed_file: ParsedFile):
        self.handler_map = handler_map
        self.parsed_file = parsed_file
        self._handlers = {}

    def _handler_for(self, kind: str):
        handler_class = self.handler_map.get(kind)
        if handler_class is None:
            return None
        if kind not in self._handlers:
            self._handlers[kind] = handler_class(self.parsed_file)
        return self._handlers[kind]

    def visit(self, node: NodeAdapter, accumulator: Accumulator) -> None:
        """Visit `node` and every descendant exactly once, pre-order."""
        stack = [node]
        while stack:
            current = stack.pop()
            handler = self._handler_for(current.kind())
            if handler is not None:
                handler.handle(current, accumulator)
            # Reverse so the leftmost child is popped first
            stack.extend(reversed(list(current.children())))


def process_file(accumulator: Accumulator, parsed_file: ParsedFile, handler_map: HandlerMap) -> None:
    """Traverse one parsed file into `accumulator` using `handler_map`.

    Raises:
        UnsupportedFileTypeError: If the parsed root has an unknown shape
    """
    root = create_node_adapter(parsed_file)
    logger.debug("Traversing %s as %s", parsed_file.path, type(root).__name__)
    SourceFileHandler(handler_map, parsed_file).visit(root, accumulator)
