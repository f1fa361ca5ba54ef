"""Dependency-graph scope: where the instrumented package is installed and by whom."""
import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from ..analyzer.models import InstallingPackage, PackageData
from ..resolver.dependency_tree import find_installers_from_tree, get_installed_version_paths, version_equals
from ..resolver.installers import find_local_installers
from .base import Scope

logger = logging.getLogger(__name__)


@dataclass
class NpmScopeResult:
    scope: str
    package: PackageData
    install_paths: List[List[str]] = field(default_factory=list)
    installers: List[InstallingPackage] = field(default_factory=list)
    local_installers: List[PackageData] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            'package': {'name': self.package.name, 'version': self.package.version},
            'install_paths': ['/'.join(path) for path in self.install_paths],
            'installers': [
                {'name': installer.name, 'version': installer.version}
                for installer in self.installers
            ],
            'local_installers': [
                {'name': local.name, 'version': local.version} for local in self.local_installers
            ],
        }


class NpmScope(Scope):
    """Resolve install paths and installers of the instrumented package."""

    name = 'npm'

    def run(self, dependency_tree: dict, local_packages: Iterable[str] = ()) -> NpmScopeResult:
        package = self.package
        result = NpmScopeResult(self.name, package)
        result.install_paths = get_installed_version_paths(
            dependency_tree, package.name, version_equals(package.version)
        )
        result.installers = find_installers_from_tree(dependency_tree, package.name, package.version)
        local_packages = list(local_packages)
        if local_packages:
            result.local_installers = find_local_installers(dependency_tree, package, local_packages)

        logger.info("%s@%s: %d installers, %d shallowest install paths",
                    package.name, package.version, len(result.installers), len(result.install_paths))
        return result
