"""Tracked source file discovery and loading."""
import logging
import subprocess
from pathlib import Path
from typing import Iterable, List, Set

from ..analyzer.parser import LanguageParser, SourceFile

logger = logging.getLogger(__name__)


def _git_tracked_files(project_root: Path) -> List[Path]:
    """Files git knows about (tracked plus untracked-but-not-ignored), or [] outside a repo."""
    try:
        completed = subprocess.run(
            ['git', 'ls-files', '--cached', '--others', '--exclude-standard'],
            cwd=project_root,
            capture_output=True,
            text=True,
            timeout=60,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        logger.debug("git ls-files unavailable: %s", e)
        return []
    if completed.returncode != 0:
        return []
    return [project_root / line for line in completed.stdout.splitlines() if line]


def discover_files(project_root: str | Path, extensions: Iterable[str],
                   excluded_dirs: Set[str]) -> List[Path]:
    """Source files under `project_root` with one of `extensions`.

    Uses git's view of the project when available and falls back to a
    recursive glob. Files inside any of `excluded_dirs` are dropped.

    Args:
        project_root: Root directory to search
        extensions: File suffixes to keep, e.g. ['.js', '.html']
        excluded_dirs: Directory names to skip

    Returns:
        Sorted list of file paths
    """
    project_root = Path(project_root).resolve()
    extensions = {ext.lower() for ext in extensions}

    candidates = _git_tracked_files(project_root)
    if not candidates:
        candidates = [path for path in project_root.rglob('*') if path.is_file()]

    files = set()
    for file_path in candidates:
        if file_path.suffix.lower() not in extensions:
            continue
        relative_parts = file_path.relative_to(project_root).parts
        if any(part in excluded_dirs for part in relative_parts):
            continue
        if file_path.is_file():
            files.add(file_path)
    return sorted(files)


def load_source_files(project_root: str | Path, paths: Iterable[Path]) -> List[SourceFile]:
    """Read files into SourceFile records with paths relative to `project_root`.

    Unreadable files and files in unsupported languages are skipped.
    """
    project_root = Path(project_root).resolve()
    source_files = []
    for path in paths:
        language = LanguageParser.detect_language(path)
        if language is None:
            continue
        try:
            content = Path(path).read_bytes()
        except OSError as e:
            logger.warning("Cannot read %s: %s", path, e)
            continue
        source_files.append(SourceFile(
            path=Path(path).resolve().relative_to(project_root).as_posix(),
            content=content,
            language=language,
        ))
    return source_files
