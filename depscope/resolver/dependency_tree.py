"""Pure lookups over an `npm ls --all --json` shaped dependency tree.

A tree node is `{"name", "version", "dependencies": {<name>: node}}`; the
root may lack a name. An install path is the list of keys leading from the
root to a node, alternating "dependencies" and a package name, e.g.
`["dependencies", "two", "dependencies", "three"]`. None of these functions
mutate the tree they are given.
"""
from typing import Callable, List, Optional, Sequence

from ..analyzer.models import InstallingPackage, PackageData
from ..exceptions import InvalidObjectPathError

DEPENDENCIES = 'dependencies'

InstallPath = List[str]
VersionPredicate = Callable[[dict], bool]


def version_equals(version: Optional[str]) -> VersionPredicate:
    """Predicate accepting tree nodes whose version is exactly `version`."""
    return lambda node: node.get('version') == version


def find_nested_deps(dependency_tree: dict, package_name: str,
                     version_predicate: VersionPredicate = None) -> List[InstallPath]:
    """Every install path whose last key is `package_name` and whose node passes the predicate.

    Paths come out in pre-order: all matches among a node's direct
    dependencies before any match found deeper below them.
    """
    matches = []
    stack = [([], dependency_tree)]
    while stack:
        path, node = stack.pop()
        children = []
        for dep_name, dep_tree in (node.get(DEPENDENCIES) or {}).items():
            if not isinstance(dep_tree, dict):
                continue
            child_path = path + [DEPENDENCIES, dep_name]
            if dep_name == package_name and (version_predicate is None or version_predicate(dep_tree)):
                matches.append(child_path)
            children.append((child_path, dep_tree))
        stack.extend(reversed(children))
    return matches


def get_installed_version_paths(dependency_tree: dict, package_name: str,
                                version_predicate: VersionPredicate = None) -> List[InstallPath]:
    """The shallowest install paths of a package; several when it is duplicated at that depth."""
    paths = sorted(find_nested_deps(dependency_tree, package_name, version_predicate), key=len)
    if not paths:
        return []
    shortest = len(paths[0])
    return [path for path in paths if len(path) == shortest]


def get_by_path(dependency_tree: dict, path: Sequence[str]) -> dict:
    """Node found by following `path` from the root.

    Raises:
        InvalidObjectPathError: If any key along the path is missing
    """
    node = dependency_tree
    for key in path:
        if not isinstance(node, dict) or key not in node:
            raise InvalidObjectPathError(path)
        node = node[key]
    return node


def get_package_trees(dependency_tree: dict, package: PackageData) -> List[dict]:
    """Subtrees rooted at each install of `package`, each tagged with its `path`.

    When the root itself is the package, it is returned alone with an empty path.
    """
    if dependency_tree.get('name') == package.name and dependency_tree.get('version') == package.version:
        return [{**dependency_tree, 'path': []}]

    return [
        {**get_by_path(dependency_tree, path), 'path': path}
        for path in find_nested_deps(dependency_tree, package.name, version_equals(package.version))
    ]


def get_tree_predecessor(dependency_tree: dict, path: Sequence[str]) -> Optional[dict]:
    """Subtree of the package that installed the node at `path`, tagged with its `path`.

    Returns None for the root, which has no predecessor.
    """
    if len(path) == 0:
        return None
    parent_path = list(path[:-2])
    return {**get_by_path(dependency_tree, parent_path), 'path': parent_path}


def get_package_sub_tree(dependency_tree: dict, path: Sequence[str]) -> InstallingPackage:
    """Name, version and direct dependencies of the node at `path`.

    Raises:
        InvalidObjectPathError: If the path does not exist in the tree
    """
    node = get_by_path(dependency_tree, path)
    name = node.get('name')
    if name is None and len(path) > 0:
        name = path[-1]

    return InstallingPackage(
        name=name,
        version=node.get('version'),
        dependencies=[
            PackageData(name=dep_name, version=dep_tree.get('version'))
            for dep_name, dep_tree in (node.get(DEPENDENCIES) or {}).items()
            if isinstance(dep_tree, dict)
        ],
    )


def find_installers_from_tree(dependency_tree: dict, package_name: str,
                              package_version: str) -> List[InstallingPackage]:
    """Packages that list `package_name@package_version` as a direct dependency."""
    matches = find_nested_deps(dependency_tree, package_name, version_equals(package_version))
    return [get_package_sub_tree(dependency_tree, match[:-2]) for match in matches]
