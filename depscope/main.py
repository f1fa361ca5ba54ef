"""depscope CLI - attribute npm package usage in JS, JSX and HTML source trees."""
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape
from rich.table import Table

from .analyzer.models import PackageData
from .config import Config, __version__, get_config
from .exceptions import DepscopeError, NoPackageJsonFoundError, UnknownScopeError
from .project.files import discover_files, load_source_files
from .project.packages import (
    PackageRootCache,
    build_index_imports_map,
    find_local_packages,
    load_dependency_tree,
    make_relevance_filter,
    read_package_data,
    resolve_components_dir,
)
from .resolver.dependency_tree import get_installed_version_paths, version_equals
from .scopes.base import ScopeResult
from .scopes.npm_scope import NpmScope
from .scopes.registry import SOURCE_SCOPES, get_scope_class
from .scopes.wc_scope import WcScope
from .utils.logger import setup_logging
from .utils.redact import Redactor
from .utils.safe_console import SafeConsole

app = typer.Typer(
    name="depscope",
    help="Find where and how an npm package is imported and used",
    add_completion=False
)
console = SafeConsole()
err_console = SafeConsole(stderr=True)


def _fail(message: str) -> None:
    err_console.print(f"[bold red]Error:[/bold red] {escape(message)}")
    raise typer.Exit(1)


def _warn(message: str) -> None:
    err_console.print(f"[yellow]Warning:[/yellow] {escape(message)}")


def _resolve_project(project_path: str) -> Path:
    path = Path(project_path).resolve()
    if not path.exists():
        _fail(f"Project path does not exist: {path}")
    return path


def _instrumented_package(name: Optional[str], version: Optional[str], package_dir: Optional[str],
                          project_path: Path) -> PackageData:
    if name:
        return PackageData(name=name, version=version)
    directory = Path(package_dir).resolve() if package_dir else project_path
    try:
        return read_package_data(directory)
    except NoPackageJsonFoundError as e:
        _fail(f"{e}. Pass --name/--version or --package-dir.")


def _report_row(usage_dict: dict, redactor: Optional[Redactor], config: Config) -> dict:
    """Apply redaction to captured values after attribution."""
    if redactor is None:
        return usage_dict
    if 'attributes' in usage_dict:
        usage_dict['attributes'] = redactor.substitute(
            usage_dict['attributes'],
            allowed_keys=config.allowed_attribute_names,
            allowed_values=config.allowed_attribute_values,
        )
    if 'arguments' in usage_dict:
        allowed = config.allowed_argument_values
        usage_dict['arguments'] = [redactor.redact(argument, allowed) for argument in usage_dict['arguments']]
    return usage_dict


def _scope_report(result: ScopeResult, rows: List[dict]) -> dict:
    return {
        'usages': rows,
        'failures': [{'file': failure.file, 'error': str(failure.error)} for failure in result.failures],
        'warnings': [{'file': warning.file, 'error': str(warning.error)} for warning in result.warnings],
        'skipped': list(result.skipped),
    }


def _print_scope_table(result: ScopeResult, rows: List[dict]) -> None:
    table = Table(title=f"Scope: {result.scope}", show_header=True, header_style="bold cyan")
    table.add_column("File", style="magenta", no_wrap=False)
    table.add_column("Kind", style="yellow")
    table.add_column("Name", style="cyan")
    table.add_column("Import", style="green")
    table.add_column("Details", no_wrap=False)

    for row in rows:
        record = row['import']
        details = row.get('attributes', row.get('arguments', ''))
        table.add_row(
            escape(row['file']),
            row['kind'],
            escape(row['name']),
            escape(f"{record['form']} {record['path']}"),
            escape(str(details)) if details else '',
        )
    console.print(table)

    for failure in result.failures:
        console.print(f"[yellow]Skipped[/yellow] {escape(str(failure))}")
    for warning in result.warnings:
        console.print(f"[dim]Warning: {escape(str(warning))}[/dim]")
    if result.skipped:
        console.print(f"[dim]{len(result.skipped)} files resolve to another version of the package[/dim]")


@app.command()
def scan(
    project_path: str = typer.Argument(".", help="Project root to analyze"),
    scope: List[str] = typer.Option(list(SOURCE_SCOPES), "--scope", "-s", help="Scope to run (js, jsx, wc); repeatable"),
    name: Optional[str] = typer.Option(None, "--name", help="Instrumented package name"),
    version: Optional[str] = typer.Option(None, "--version", help="Instrumented package version"),
    package_dir: Optional[str] = typer.Option(None, "--package-dir", help="Directory holding the instrumented package.json"),
    json_output: bool = typer.Option(False, "--json", help="Print results as JSON"),
    no_filter: bool = typer.Option(False, "--no-filter", help="Analyze every file, even those resolving to another installed version"),
    no_redact: bool = typer.Option(False, "--no-redact", help="Report attribute and argument values verbatim"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Attribute usages of the instrumented package across the project."""
    config = get_config()
    setup_logging('DEBUG' if verbose else config.log_level, console=err_console)

    project = _resolve_project(project_path)
    instrumented = _instrumented_package(name, version, package_dir, project)

    scope_classes = []
    for scope_name in scope:
        try:
            scope_class = get_scope_class(scope_name)
        except UnknownScopeError as e:
            _fail(str(e))
        if scope_class is NpmScope:
            _fail("The npm scope runs through the 'installers' command")
        scope_classes.append(scope_class)

    extensions = set()
    for scope_class in scope_classes:
        extensions.update(scope_class.file_extensions)
    source_files = load_source_files(project, discover_files(project, extensions, config.excluded_dirs))

    file_filter = None
    if no_filter:
        pass
    elif instrumented.version is None:
        _warn(f"No version known for {instrumented.name}; analyzing every file")
    else:
        try:
            tree = load_dependency_tree(project)
            file_filter = make_relevance_filter(project, tree, instrumented, PackageRootCache())
        except DepscopeError as e:
            _warn(f"{e}; analyzing every file")

    redactor = None if no_redact else Redactor()

    report = {}
    for scope_class in scope_classes:
        kwargs = {'root': str(project), 'file_filter': file_filter, 'config': config}
        if scope_class is WcScope:
            kwargs['index_map'] = build_index_imports_map(resolve_components_dir(project, instrumented.name))
        result = scope_class(instrumented, **kwargs).run(source_files)
        rows = [_report_row(usage.as_dict(), redactor, config) for usage in result.usages]
        report[result.scope] = _scope_report(result, rows)

        if not json_output:
            _print_scope_table(result, rows)

    if json_output:
        console.print_json(data={
            'package': {'name': instrumented.name, 'version': instrumented.version},
            'scopes': report,
        })
    else:
        total = sum(len(entry['usages']) for entry in report.values())
        console.print(f"\n[bold green]{total} usages of {escape(instrumented.name)}[/bold green] "
                      f"in {len(source_files)} files")


@app.command()
def installers(
    project_path: str = typer.Argument(".", help="Project root holding node_modules"),
    name: str = typer.Option(..., "--name", help="Package name"),
    version: str = typer.Option(..., "--version", help="Package version"),
    json_output: bool = typer.Option(False, "--json", help="Print results as JSON"),
):
    """Show where a package version is installed and which packages install it."""
    config = get_config()
    setup_logging(config.log_level, console=err_console)

    project = _resolve_project(project_path)
    try:
        tree = load_dependency_tree(project)
    except DepscopeError as e:
        _fail(str(e))

    result = NpmScope(PackageData(name=name, version=version), config=config).run(
        tree, find_local_packages(project, excluded_dirs=config.excluded_dirs)
    )

    if json_output:
        console.print_json(data=result.as_dict())
        return

    if not result.install_paths:
        console.print(f"[bold yellow]{escape(name)}@{escape(version)} is not installed[/bold yellow]")
        return

    table = Table(title=f"Installers of {name}@{version}", show_header=True, header_style="bold cyan")
    table.add_column("Installer", style="cyan")
    table.add_column("Version", style="green")
    table.add_column("Local", justify="center")
    local_names = {local.name for local in result.local_installers}
    for installer in result.installers:
        table.add_row(escape(str(installer.name)), str(installer.version or ''),
                      "yes" if installer.name in local_names else "")
    console.print(table)

    console.print("\n[bold]Shallowest install paths:[/bold]")
    for path in result.install_paths:
        console.print(f"  {escape('/'.join(path))}")
    if result.local_installers:
        console.print("\n[bold]Workspace packages pulling it in:[/bold]")
        for local in result.local_installers:
            console.print(f"  {escape(local.name)}@{local.version}")


@app.command()
def paths(
    project_path: str = typer.Argument(".", help="Project root holding node_modules"),
    name: str = typer.Option(..., "--name", help="Package name"),
    version: Optional[str] = typer.Option(None, "--version", help="Only installs of this version"),
    json_output: bool = typer.Option(False, "--json", help="Print results as JSON"),
):
    """Show the shallowest install paths of a package in the dependency tree."""
    config = get_config()
    setup_logging(config.log_level, console=err_console)

    project = _resolve_project(project_path)
    try:
        tree = load_dependency_tree(project)
    except DepscopeError as e:
        _fail(str(e))

    predicate = version_equals(version) if version else None
    install_paths = get_installed_version_paths(tree, name, predicate)

    if json_output:
        console.print_json(data={'name': name, 'version': version, 'paths': install_paths})
        return

    label = f"{name}@{version}" if version else name
    if not install_paths:
        console.print(f"[bold yellow]{escape(label)} is not installed[/bold yellow]")
        return
    console.print(f"[bold]Shallowest install paths of {escape(label)}:[/bold]")
    for path in install_paths:
        console.print(f"  {escape('/'.join(path))}")


def _version_callback(value: bool):
    if value:
        console.print(f"depscope {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    show_version: bool = typer.Option(False, "--app-version", callback=_version_callback, is_eager=True,
                                      help="Show the depscope version and exit"),
):
    """depscope - usage attribution for npm packages."""


if __name__ == "__main__":
    app()
