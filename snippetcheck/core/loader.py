"""Documentation file discovery and loading."""

import fnmatch
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import List, Optional, Sequence, Union

from .errors import ContentRootError
from ..utils.logging_setup import get_logger

logger = get_logger(__name__)

DEFAULT_EXTENSION = ".mdx"


@dataclass(frozen=True)
class Document:
    """One content file. ``path`` is the display path used in reports."""
    path: str
    raw_text: str


def _check_root(root: Path) -> None:
    if not root.exists():
        raise ContentRootError(f"Content root does not exist: {root}")
    if not root.is_dir():
        raise ContentRootError(f"Content root is not a directory: {root}")
    try:
        next(root.iterdir(), None)
    except OSError as e:
        raise ContentRootError(f"Cannot read content root {root}: {e}") from e


def _list_with_ripgrep(root: Path, extension: str) -> List[str]:
    """List matching files relative to ``root`` using ripgrep.

    Hidden paths are listed and ignore files (``.gitignore``, ``.ignore``)
    are not honoured, so the listing matches :func:`_list_with_walk`.
    Paths are skipped through ``content.exclude`` only.

    Raises:
        FileNotFoundError: if ``rg`` is not installed
        subprocess.CalledProcessError: if ``rg`` exits with an error
    """
    executable = shutil.which("rg")
    if executable is None:
        raise FileNotFoundError("rg")
    result = subprocess.run(
        [executable, "--files", "--hidden", "--no-ignore", "-g", f"*{extension}"],
        cwd=root,
        capture_output=True,
        text=True,
        check=True,
    )
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


def _list_with_walk(root: Path, extension: str) -> List[str]:
    """List matching files relative to ``root`` with a recursive walk."""
    files = []
    for p in root.rglob(f"*{extension}"):
        if p.is_file():
            files.append(p.relative_to(root).as_posix())
    return files


def _is_excluded(relative: str, exclude: Sequence[str]) -> bool:
    parts = PurePosixPath(relative).parts
    for pattern in exclude:
        if fnmatch.fnmatch(relative, pattern):
            return True
        # Bare directory names exclude everything beneath them
        if pattern in parts[:-1]:
            return True
    return False


def collect_documents(
    root: Union[str, Path],
    extension: str = DEFAULT_EXTENSION,
    exclude: Optional[Sequence[str]] = None,
) -> List[str]:
    """Collect content files under ``root``.

    ripgrep is tried first; when it is unavailable or fails, a filesystem walk
    produces the same list. Returned paths keep ``root`` as given as their
    prefix (``docs/guide/intro.mdx``) and are sorted so repeated runs see the
    same order.

    Args:
        root: Content root directory
        extension: File extension to match, including the dot
        exclude: Glob patterns or directory names to skip

    Returns:
        Sorted list of document paths

    Raises:
        ContentRootError: if the root does not exist or cannot be read
    """
    root_path = Path(root)
    _check_root(root_path)
    exclude = list(exclude or [])

    try:
        relative = _list_with_ripgrep(root_path, extension)
        logger.debug(f"ripgrep listed {len(relative)} files under {root_path}")
    except (FileNotFoundError, subprocess.CalledProcessError, OSError) as e:
        logger.debug(f"ripgrep unavailable ({e}); falling back to directory walk")
        try:
            relative = _list_with_walk(root_path, extension)
        except OSError as walk_error:
            raise ContentRootError(f"Cannot read content root {root_path}: {walk_error}") from walk_error

    prefix = PurePosixPath(root_path.as_posix())
    files = set()
    for rel in relative:
        rel = rel[2:] if rel.startswith("./") else rel
        rel = rel.replace("\\", "/")
        if _is_excluded(rel, exclude):
            continue
        files.add(str(prefix / rel))

    return sorted(files)


def load_document(path: Union[str, Path]) -> Document:
    """Read a content file as UTF-8 text."""
    text = Path(path).read_text(encoding="utf-8", errors="replace")
    return Document(path=Path(path).as_posix(), raw_text=text)
