"""Tests for nearest-install version resolution and the npm scope."""
import pytest

from depscope.analyzer.models import PackageData
from depscope.exceptions import NoInstallationFoundError
from depscope.resolver.installers import build_dependency_graph, find_local_installers
from depscope.resolver.relevance import find_installed_versions, is_relevant_source
from depscope.scopes.npm_scope import NpmScope


class TestFindInstalledVersions:

    def test_own_dependency_wins(self, basic_tree):
        assert find_installed_versions(basic_tree, PackageData('two', '2.0.0'), 'three') == ['3.0.0']
        assert find_installed_versions(basic_tree, PackageData('five', '1.0.0'), 'three') == ['2.0.0']

    def test_walks_up_to_installer(self, basic_tree):
        assert find_installed_versions(basic_tree, PackageData('two', '2.0.0'), 'four') == ['1.0.1']

    def test_root_package(self, basic_tree):
        assert find_installed_versions(basic_tree, PackageData('root-pkg', '1.0.0'), 'three') == ['3.0.0']

    def test_not_installed(self, basic_tree):
        with pytest.raises(NoInstallationFoundError):
            find_installed_versions(basic_tree, PackageData('two', '2.0.0'), 'six')

    def test_unknown_prefix_package(self, basic_tree):
        with pytest.raises(NoInstallationFoundError):
            find_installed_versions(basic_tree, PackageData('ghost', '0.0.1'), 'three')


def test_is_relevant_source(basic_tree):
    instrumented = PackageData('three', '2.0.0')
    assert is_relevant_source(basic_tree, PackageData('five', '1.0.0'), instrumented)
    assert not is_relevant_source(basic_tree, PackageData('two', '2.0.0'), instrumented)


class TestInstallers:

    def test_graph_collapses_duplicates(self, basic_tree):
        graph = build_dependency_graph(basic_tree)
        assert sorted(graph.predecessors(('four', '1.0.1'))) == [('five', '1.0.0'), ('one', '1.0.0')]
        assert sorted(graph.predecessors(('three', '3.0.0'))) == [('root-pkg', '1.0.0'), ('two', '2.0.0')]

    def test_local_installers_stop_at_workspace_packages(self, basic_tree):
        found = find_local_installers(basic_tree, PackageData('three', '3.0.0'), ['root-pkg', 'one'])
        assert found == [PackageData('root-pkg', '1.0.0'), PackageData('one', '1.0.0')]

    def test_unknown_package(self, basic_tree):
        assert find_local_installers(basic_tree, PackageData('six', '1.0.0'), ['root-pkg']) == []


def test_npm_scope(basic_tree, config):
    result = NpmScope(PackageData('three', '3.0.0'), config=config).run(basic_tree, local_packages=['one'])

    assert result.install_paths == [['dependencies', 'three']]
    assert [installer.name for installer in result.installers] == ['root-pkg', 'two']
    assert result.local_installers == [PackageData('one', '1.0.0')]
    assert result.as_dict()['install_paths'] == ['dependencies/three']
