from pathlib import Path
from typing import Optional, Sequence


class PathResolver:
    """
    Best-effort import resolution.
    Maps an import specifier to a file on disk by appending each probe extension
    in order. Package names, specifiers that already carry an extension and
    directory index files are left unresolved.
    """

    EXTENSIONS = ('.js', '.jsx', '.ts', '.tsx')

    def __init__(self, extensions: Optional[Sequence[str]] = None):
        self.extensions = tuple(extensions) if extensions is not None else self.EXTENSIONS

    def resolve(self, current_file: Path, import_string: str) -> Optional[Path]:
        """
        Determines the absolute file path of an imported module.

        Args:
            current_file: Path of the file containing the import.
            import_string: The module specifier used in the import (e.g., './utils').

        Returns:
            The first existing candidate, or None.
        """
        if not import_string:
            return None

        base_dir = Path(current_file).parent
        for ext in self.extensions:
            # Appended rather than with_suffix() so './config.prod' probes 'config.prod.js'
            candidate = (base_dir / f"{import_string}{ext}").resolve()
            if candidate.is_file():
                return candidate

        return None
