"""Exception types raised by depscope.

Every error the analyzer raises on purpose derives from DepscopeError so the
CLI and the scope orchestrator can tell them apart from programming errors.
"""


class DepscopeError(Exception):
    """Base class for all depscope errors."""


class UnsupportedFileTypeError(DepscopeError):
    """Parsed root matches neither the script nor the markup grammar."""

    def __init__(self, file_name: str, root_kind: str = None):
        self.file_name = file_name
        self.root_kind = root_kind
        detail = f" (root node '{root_kind}')" if root_kind else ""
        super().__init__(f"Unsupported file type: {file_name}{detail}")


class NoAttributeExpressionFoundError(DepscopeError):
    """A JSX expression attribute has no expression body, e.g. `attr={}`."""

    def __init__(self, attribute_text: str):
        self.attribute_text = attribute_text
        super().__init__(f"No expression found in attribute: {attribute_text}")


class InvalidObjectPathError(DepscopeError):
    """An install path does not exist in the dependency tree."""

    def __init__(self, path):
        self.path = list(path)
        super().__init__(f"Invalid object path: {'.'.join(self.path)}")


class NoInstallationFoundError(DepscopeError):
    """No install of a package is reachable from a source file's package."""

    def __init__(self, package_name: str):
        self.package_name = package_name
        super().__init__(f"No installation found for package: {package_name}")


class NoPackageJsonFoundError(DepscopeError):
    """A directory has no readable package.json."""

    def __init__(self, directory: str):
        self.directory = directory
        super().__init__(f"No package.json found in: {directory}")


class InvalidRootPathError(DepscopeError):
    """A directory is not located under the given root directory."""

    def __init__(self, root: str, leaf: str):
        self.root = root
        self.leaf = leaf
        super().__init__(f"{leaf} is not contained in root {root}")


class UnknownScopeError(DepscopeError):
    """A scope name has no registered scope class."""

    def __init__(self, scope_name: str):
        self.scope_name = scope_name
        super().__init__(f"Unknown scope: {scope_name}")
