"""Integration tests for the depscope CLI."""
import json

import pytest
from typer.testing import CliRunner

from depscope import main
from depscope.exceptions import DepscopeError
from depscope.main import app
from depscope.scopes import base

runner = CliRunner()

APP = """
import { Button } from '@acme/ui';
import '@acme/ui/styles.css';

export const App = () => <Button kind="primary" label={title} />;
"""


@pytest.fixture
def project(tmp_path, monkeypatch, config):
    (tmp_path / 'package.json').write_text(json.dumps({'name': 'root-pkg', 'version': '1.0.0'}))
    (tmp_path / 'src').mkdir()
    (tmp_path / 'src' / 'App.jsx').write_text(APP)
    (tmp_path / 'node_modules' / '@acme' / 'ui').mkdir(parents=True)
    (tmp_path / 'node_modules' / '@acme' / 'ui' / 'index.js').write_text("import { Button } from '@acme/ui';")

    monkeypatch.setattr(main, 'get_config', lambda: config)
    monkeypatch.setattr('depscope.project.files._git_tracked_files', lambda root: [])
    return tmp_path


class TestScanCommand:

    def test_scan_json(self, project):
        result = runner.invoke(app, ['scan', str(project), '--name', '@acme/ui', '--version', '1.0.0',
                                     '--no-filter', '--no-redact', '--json'])

        assert result.exit_code == 0, result.output
        report = json.loads(result.stdout)
        assert report['package'] == {'name': '@acme/ui', 'version': '1.0.0'}
        assert report['scopes']['js'] == {'usages': [], 'failures': [], 'warnings': [], 'skipped': []}
        assert report['scopes']['wc']['usages'] == []

        jsx_rows = report['scopes']['jsx']['usages']
        assert len(jsx_rows) == 1
        assert jsx_rows[0]['name'] == 'Button'
        assert jsx_rows[0]['attributes'] == {'kind': 'primary', 'label': 'title'}

    def test_scan_redacts_by_default(self, project):
        result = runner.invoke(app, ['scan', str(project), '--name', '@acme/ui', '--scope', 'jsx',
                                     '--no-filter', '--json'])

        assert result.exit_code == 0, result.output
        row = json.loads(result.stdout)['scopes']['jsx']['usages'][0]
        assert 'primary' not in row['attributes'].values()
        assert all(value.startswith('[redacted') for value in row['attributes'].values())

    def test_argument_allow_list_does_not_unredact_attributes(self, project, monkeypatch):
        monkeypatch.setenv('DEPSCOPE_ALLOWED_ATTRIBUTE_NAMES', 'kind')
        monkeypatch.setenv('DEPSCOPE_ALLOWED_ARGUMENT_VALUES', 'primary')

        result = runner.invoke(app, ['scan', str(project), '--name', '@acme/ui', '--scope', 'jsx',
                                     '--no-filter', '--json'])

        assert result.exit_code == 0, result.output
        attributes = json.loads(result.stdout)['scopes']['jsx']['usages'][0]['attributes']
        assert attributes['kind'].startswith('[redacted')

    def test_attribute_allow_list_keeps_values(self, project, monkeypatch):
        monkeypatch.setenv('DEPSCOPE_ALLOWED_ATTRIBUTE_NAMES', 'kind')
        monkeypatch.setenv('DEPSCOPE_ALLOWED_ATTRIBUTE_VALUES', 'primary')

        result = runner.invoke(app, ['scan', str(project), '--name', '@acme/ui', '--scope', 'jsx',
                                     '--no-filter', '--json'])

        assert result.exit_code == 0, result.output
        attributes = json.loads(result.stdout)['scopes']['jsx']['usages'][0]['attributes']
        assert attributes['kind'] == 'primary'

    def test_name_without_version_analyzes_every_file(self, project, monkeypatch):
        def load_dependency_tree(root):
            raise AssertionError('dependency tree is not needed without a version')
        monkeypatch.setattr(main, 'load_dependency_tree', load_dependency_tree)

        result = runner.invoke(app, ['scan', str(project), '--name', '@acme/ui', '--scope', 'jsx', '--json'])

        assert result.exit_code == 0, result.output
        assert 'No version known for @acme/ui' in result.output
        rows = json.loads(result.stdout)['scopes']['jsx']['usages']
        assert [row['name'] for row in rows] == ['Button']

    def test_json_stays_valid_when_npm_ls_fails(self, project, monkeypatch):
        def load_dependency_tree(root):
            raise DepscopeError('Could not run npm ls: npm')
        monkeypatch.setattr(main, 'load_dependency_tree', load_dependency_tree)

        result = runner.invoke(app, ['scan', str(project), '--name', '@acme/ui', '--version', '1.0.0',
                                     '--scope', 'jsx', '--json'])

        assert result.exit_code == 0, result.output
        assert 'analyzing every file' in result.output
        report = json.loads(result.stdout)
        assert len(report['scopes']['jsx']['usages']) == 1

    def test_json_reports_failures(self, project, monkeypatch):
        (project / 'src' / 'Broken.jsx').write_text("export const Broken = <Button />;")
        parse_source_file = base.parse_source_file

        def failing_parse(source_file):
            if source_file.path == 'src/Broken.jsx':
                raise DepscopeError('cannot parse')
            return parse_source_file(source_file)
        monkeypatch.setattr(base, 'parse_source_file', failing_parse)

        result = runner.invoke(app, ['scan', str(project), '--name', '@acme/ui', '--scope', 'jsx',
                                     '--no-filter', '--json'])

        assert result.exit_code == 0, result.output
        entry = json.loads(result.stdout)['scopes']['jsx']
        assert entry['failures'] == [{'file': 'src/Broken.jsx', 'error': 'cannot parse'}]
        assert len(entry['usages']) == 1

    def test_scan_table(self, project):
        result = runner.invoke(app, ['scan', str(project), '--name', '@acme/ui', '--scope', 'jsx', '--no-filter'])

        assert result.exit_code == 0, result.output
        assert 'Scope: jsx' in result.stdout
        assert 'usages of @acme/ui' in result.stdout

    def test_package_from_package_json(self, project):
        result = runner.invoke(app, ['scan', str(project), '--scope', 'jsx', '--no-filter', '--json'])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)['package'] == {'name': 'root-pkg', 'version': '1.0.0'}

    def test_nonexistent_path(self, project):
        result = runner.invoke(app, ['scan', '/nonexistent/path', '--name', 'x'])
        assert result.exit_code == 1

    def test_unknown_scope(self, project):
        result = runner.invoke(app, ['scan', str(project), '--name', 'x', '--scope', 'css'])
        assert result.exit_code == 1
        assert 'Unknown scope: css' in result.output
        assert 'Unknown scope' not in result.stdout

    def test_npm_scope_is_rejected(self, project):
        result = runner.invoke(app, ['scan', str(project), '--name', 'x', '--scope', 'npm'])
        assert result.exit_code == 1


class TestInstallersCommand:

    def test_installers_json(self, project, basic_tree, monkeypatch):
        monkeypatch.setattr(main, 'load_dependency_tree', lambda root: basic_tree)

        result = runner.invoke(app, ['installers', str(project), '--name', 'three', '--version', '3.0.0', '--json'])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data['install_paths'] == ['dependencies/three']
        assert data['installers'] == [
            {'name': 'root-pkg', 'version': '1.0.0'},
            {'name': 'two', 'version': '2.0.0'},
        ]
        assert data['local_installers'] == [{'name': 'root-pkg', 'version': '1.0.0'}]

    def test_not_installed(self, project, basic_tree, monkeypatch):
        monkeypatch.setattr(main, 'load_dependency_tree', lambda root: basic_tree)

        result = runner.invoke(app, ['installers', str(project), '--name', 'six', '--version', '1.0.0'])

        assert result.exit_code == 0
        assert 'is not installed' in result.stdout


class TestPathsCommand:

    def test_duplicated_install(self, project, basic_tree, monkeypatch):
        monkeypatch.setattr(main, 'load_dependency_tree', lambda root: basic_tree)

        result = runner.invoke(app, ['paths', str(project), '--name', 'four', '--json'])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)['paths'] == [
            ['dependencies', 'one', 'dependencies', 'four'],
            ['dependencies', 'five', 'dependencies', 'four'],
        ]

    def test_version_narrows_paths(self, project, basic_tree, monkeypatch):
        monkeypatch.setattr(main, 'load_dependency_tree', lambda root: basic_tree)

        result = runner.invoke(app, ['paths', str(project), '--name', 'three', '--version', '2.0.0'])

        assert result.exit_code == 0, result.output
        lines = [line.strip() for line in result.stdout.splitlines()]
        assert 'dependencies/five/dependencies/three' in lines
        assert 'dependencies/three' not in lines

    def test_shallowest_only(self, project, basic_tree, monkeypatch):
        monkeypatch.setattr(main, 'load_dependency_tree', lambda root: basic_tree)

        result = runner.invoke(app, ['paths', str(project), '--name', 'three'])

        assert result.exit_code == 0, result.output
        lines = [line.strip() for line in result.stdout.splitlines()]
        assert 'dependencies/three' in lines
        assert 'dependencies/one/dependencies/two/dependencies/three' not in lines

    def test_not_installed(self, project, basic_tree, monkeypatch):
        monkeypatch.setattr(main, 'load_dependency_tree', lambda root: basic_tree)

        result = runner.invoke(app, ['paths', str(project), '--name', 'six'])

        assert result.exit_code == 0
        assert 'six is not installed' in result.stdout

    def test_npm_ls_failure(self, project, monkeypatch):
        def load_dependency_tree(root):
            raise DepscopeError('Could not run npm ls: npm')
        monkeypatch.setattr(main, 'load_dependency_tree', load_dependency_tree)

        result = runner.invoke(app, ['paths', str(project), '--name', 'three', '--json'])

        assert result.exit_code == 1
        assert 'Could not run npm ls' in result.output
        assert result.stdout == ''


def test_app_version():
    result = runner.invoke(app, ['--app-version'])
    assert result.exit_code == 0
    assert 'depscope' in result.stdout
