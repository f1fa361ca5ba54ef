"""Installer lookups over the dependency tree as a NetworkX graph."""
from collections import deque
from typing import Iterable, List, Tuple

import networkx as nx

from ..analyzer.models import PackageData
from .dependency_tree import DEPENDENCIES

PackageId = Tuple[str, str]


def build_dependency_graph(dependency_tree: dict) -> nx.DiGraph:
    """Directed graph where edge (A, B) means "package A installs package B".

    Nodes are (name, version) pairs, so a package hoisted to several places
    in the tree becomes one node with several installers.
    """
    graph = nx.DiGraph()
    root_id = (dependency_tree.get('name'), dependency_tree.get('version'))
    stack = [(root_id, dependency_tree)]
    seen = set()

    while stack:
        parent_id, node = stack.pop()
        if parent_id[0] is not None:
            graph.add_node(parent_id, name=parent_id[0], version=parent_id[1])
        for dep_name, dep_tree in (node.get(DEPENDENCIES) or {}).items():
            if not isinstance(dep_tree, dict):
                continue
            dep_id = (dep_name, dep_tree.get('version'))
            graph.add_node(dep_id, name=dep_name, version=dep_id[1])
            if parent_id[0] is not None:
                graph.add_edge(parent_id, dep_id)
            # Identical subtrees recur under deduplicated installs; expand each id once
            if (parent_id, dep_id) not in seen:
                seen.add((parent_id, dep_id))
                stack.append((dep_id, dep_tree))
    return graph


def find_local_installers(dependency_tree: dict, package: PackageData,
                          local_packages: Iterable[str]) -> List[PackageData]:
    """Nearest workspace packages that pull `package` in, directly or transitively.

    Walks installers upward from `package` and stops on each branch at the
    first package whose name is in `local_packages`.
    """
    graph = build_dependency_graph(dependency_tree)
    start = (package.name, package.version)
    if start not in graph:
        return []

    local = set(local_packages)
    found = []
    visited = {start}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        for installer in sorted(graph.predecessors(current), key=lambda n: (n[0], n[1] or '')):
            if installer in visited:
                continue
            visited.add(installer)
            if installer[0] in local:
                found.append(PackageData(name=installer[0], version=installer[1]))
            else:
                queue.append(installer)
    return found
