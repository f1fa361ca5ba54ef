"""Decide which source files actually consume the instrumented package version.

A monorepo can install several versions of the same package. A source file
uses the version installed closest to the package that owns the file, so the
search starts at that package's subtrees and walks up one installer at a time.
"""
import logging
from typing import List

from ..analyzer.models import PackageData
from ..exceptions import NoInstallationFoundError
from .dependency_tree import get_by_path, get_installed_version_paths, get_package_trees, get_tree_predecessor

logger = logging.getLogger(__name__)


def find_installed_versions(dependency_tree: dict, prefix_package: PackageData,
                            package_name: str) -> List[str]:
    """Versions of `package_name` visible from `prefix_package`.

    Args:
        dependency_tree: Full project dependency tree
        prefix_package: Package owning the source file (nearest package.json)
        package_name: Instrumented package name

    Returns:
        Versions at the shallowest level where an install was found

    Raises:
        NoInstallationFoundError: If no ancestor of prefix_package can reach an install
    """
    package_trees = get_package_trees(dependency_tree, prefix_package)
    versions = None
    shortest = None

    while shortest is None and package_trees:
        for package_tree in package_trees:
            paths = get_installed_version_paths(package_tree, package_name)
            if not paths:
                continue
            if shortest is None or len(paths[0]) < shortest:
                shortest = len(paths[0])
                versions = [get_by_path(package_tree, path).get('version') for path in paths]

        predecessors = (get_tree_predecessor(dependency_tree, tree['path']) for tree in package_trees)
        package_trees = [tree for tree in predecessors if tree is not None]

    if versions is None:
        raise NoInstallationFoundError(package_name)
    return versions


def is_relevant_source(dependency_tree: dict, prefix_package: PackageData,
                       instrumented: PackageData) -> bool:
    """True if files owned by `prefix_package` resolve to the instrumented version."""
    versions = find_installed_versions(dependency_tree, prefix_package, instrumented.name)
    logger.debug("%s sees %s@%s", prefix_package.name, instrumented.name, versions)
    return instrumented.version in versions
