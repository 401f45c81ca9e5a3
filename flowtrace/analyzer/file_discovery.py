"""Source file discovery under an analysis root."""
import logging
from pathlib import Path
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = ('.js', '.jsx', '.ts', '.tsx')

# Installed packages and VCS metadata. Build output folders are skipped only
# when passed in excluded_dirs.
DEFAULT_EXCLUDED_DIRS = frozenset({'node_modules', '.git'})


class SourceRootError(Exception):
    """Raised when the analysis root cannot be enumerated."""


class SourceEnumerator:
    """List JavaScript/TypeScript source files below a root directory."""

    def __init__(self, extensions: Iterable[str] = SOURCE_EXTENSIONS,
                 excluded_dirs: Optional[Iterable[str]] = None):
        """Initialize enumerator.

        Args:
            extensions: File suffixes to collect
            excluded_dirs: Directory names to skip anywhere in the tree.
                           None uses DEFAULT_EXCLUDED_DIRS; pass an empty set
                           to include everything.
        """
        self.extensions = tuple(ext.lower() for ext in extensions)
        self.excluded_dirs = frozenset(DEFAULT_EXCLUDED_DIRS if excluded_dirs is None else excluded_dirs)

    def list_files(self, root_dir: str | Path) -> List[Path]:
        """Recursively collect matching files, sorted for a stable order.

        Args:
            root_dir: Directory to scan

        Returns:
            Sorted list of absolute file paths

        Raises:
            SourceRootError: If root_dir is missing, not a directory, or unreadable
        """
        root = Path(root_dir).resolve()
        if not root.exists():
            raise SourceRootError(f"Source root does not exist: {root}")
        if not root.is_dir():
            raise SourceRootError(f"Source root is not a directory: {root}")

        try:
            # rglob swallows permission errors, so probe the root explicitly
            next(root.iterdir(), None)
        except OSError as e:
            raise SourceRootError(f"Cannot read source root {root}: {e}") from e

        files = []
        for file_path in root.rglob('*'):
            if file_path.suffix.lower() not in self.extensions:
                continue
            relative_parts = file_path.relative_to(root).parts[:-1]
            if any(part in self.excluded_dirs for part in relative_parts):
                continue
            if file_path.is_file():
                files.append(file_path)

        files.sort(key=lambda p: p.relative_to(root).as_posix())
        logger.debug("Discovered %d source files under %s", len(files), root)
        return files
