"""Package metadata collaborators: package.json, npm's dependency tree, component indexes."""
import json
import logging
import os
import re
import subprocess
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..analyzer.models import PackageData
from ..analyzer.parser import SourceFile
from ..exceptions import DepscopeError, InvalidRootPathError, NoInstallationFoundError, NoPackageJsonFoundError
from ..resolver.relevance import is_relevant_source

logger = logging.getLogger(__name__)

_SIDE_EFFECT_IMPORT = re.compile(r'''^import\s+['"]([^'"]+)['"];?''', re.MULTILINE)


def read_package_data(directory: str | Path) -> PackageData:
    """Name and version from `<directory>/package.json`.

    Raises:
        NoPackageJsonFoundError: If the file is missing or not valid JSON
    """
    package_json = Path(directory) / 'package.json'
    try:
        data = json.loads(package_json.read_text(encoding='utf-8'))
    except (OSError, json.JSONDecodeError) as e:
        raise NoPackageJsonFoundError(str(directory)) from e
    return PackageData(name=data.get('name'), version=data.get('version'))


def enumerate_directories(leaf: str | Path, root: str | Path) -> List[Path]:
    """Directories from `leaf` up to and including `root`, nearest first.

    Raises:
        InvalidRootPathError: If leaf is not inside root
    """
    leaf = Path(leaf).resolve()
    root = Path(root).resolve()
    if leaf != root and root not in leaf.parents:
        raise InvalidRootPathError(str(root), str(leaf))

    directories = [leaf]
    current = leaf
    while current != root:
        current = current.parent
        directories.append(current)
    return directories


class PackageRootCache:
    """Directory -> owning package memo, created once per analysis run."""

    def __init__(self):
        self._packages: Dict[Path, Optional[PackageData]] = {}

    def __len__(self) -> int:
        return len(self._packages)

    def find_package(self, directory: str | Path, root: str | Path) -> Optional[PackageData]:
        """Package of the nearest package.json between `directory` and `root`."""
        for candidate in enumerate_directories(directory, root):
            if candidate in self._packages:
                return self._packages[candidate]
            if (candidate / 'package.json').is_file():
                package = read_package_data(candidate)
                self._packages[Path(directory).resolve()] = package
                self._packages[candidate] = package
                return package
        self._packages[Path(directory).resolve()] = None
        return None


def load_dependency_tree(project_root: str | Path) -> dict:
    """Run `npm ls --all --json` in project_root and return the parsed tree.

    npm exits non-zero for peer or extraneous problems while still printing a
    usable tree, so only unparseable output is treated as an error.

    Raises:
        DepscopeError: If npm is missing or its output is not JSON
    """
    try:
        completed = subprocess.run(
            ['npm', 'ls', '--all', '--json'],
            cwd=project_root,
            capture_output=True,
            text=True,
            timeout=300,
            shell=os.name == 'nt',
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        raise DepscopeError(f"Could not run npm ls: {e}") from e

    try:
        return json.loads(completed.stdout or '{}')
    except json.JSONDecodeError as e:
        raise DepscopeError(f"npm ls produced invalid JSON: {e}") from e


def find_local_packages(project_root: str | Path, excluded_dirs=('node_modules', '.git')) -> List[str]:
    """Names of every package.json package in the workspace, root included."""
    names = []
    project_root = Path(project_root)
    for package_json in sorted(project_root.rglob('package.json')):
        if any(part in excluded_dirs for part in package_json.relative_to(project_root).parent.parts):
            continue
        try:
            package = read_package_data(package_json.parent)
        except NoPackageJsonFoundError as e:
            logger.warning("%s", e)
            continue
        if package.name:
            names.append(package.name)
    return names


def resolve_components_dir(project_root: str | Path, package_name: str) -> Optional[Path]:
    """First directory named `components` inside node_modules/<package_name>."""
    package_dir = Path(project_root) / 'node_modules' / package_name
    if not package_dir.is_dir():
        return None
    for directory in sorted(package_dir.rglob('components')):
        if directory.is_dir():
            return directory
    return None


def build_index_imports_map(components_dir: Optional[Path]) -> Dict[str, List[str]]:
    """Component name -> side-effect import paths listed in its `index.js`."""
    index_map = {}
    if components_dir is None:
        return index_map
    for component_dir in sorted(p for p in Path(components_dir).iterdir() if p.is_dir()):
        index_path = component_dir / 'index.js'
        if not index_path.is_file():
            continue
        try:
            content = index_path.read_text(encoding='utf-8')
        except OSError as e:
            logger.warning("Cannot read %s: %s", index_path, e)
            continue
        imports = sorted(set(_SIDE_EFFECT_IMPORT.findall(content)))
        if imports:
            index_map[component_dir.name] = imports
    return index_map


def make_relevance_filter(project_root: str | Path, dependency_tree: dict, instrumented: PackageData,
                          cache: PackageRootCache) -> Callable[[SourceFile], bool]:
    """File filter keeping files whose owning package resolves to the instrumented version.

    Files whose package cannot reach any install of the instrumented package
    are not relevant.
    """
    project_root = Path(project_root).resolve()

    def is_relevant(source_file: SourceFile) -> bool:
        directory = (project_root / source_file.path).parent
        prefix_package = cache.find_package(directory, project_root)
        if prefix_package is None:
            return False
        try:
            return is_relevant_source(dependency_tree, prefix_package, instrumented)
        except NoInstallationFoundError:
            logger.debug("%s: %s is not installed for %s", source_file.path,
                         instrumented.name, prefix_package.name)
            return False

    return is_relevant
