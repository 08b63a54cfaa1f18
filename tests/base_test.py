import tempfile
import unittest
from datetime import datetime
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Tuple

from dirsort.core import FileOrganizer, OrganizeOptions
from dirsort.resolver import CategoryResolver


def no_mime_type(file_name: str) -> Tuple[Optional[str], Optional[str]]:
    """Stand-in for `mimetypes.guess_type` that never recognizes anything."""
    return None, None


class BaseOrganizerTest(unittest.TestCase):
    """
    Provides a common foundation for the application's test suites.

    Every test gets its own temporary directory (`self.root`) to organize,
    a standard rule set matching one extension per category, and a fixed
    clock so date prefixes are predictable.
    """

    SCENARIO_FILES = ("test.mp3", "test.mp4", "test.jpg", "test.pdf", "test.zip", "test.exe", "test.go")

    def setUp(self) -> None:
        """Creates the temporary directory and the shared test data."""
        tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(tmp_dir.cleanup)
        self.root = Path(tmp_dir.name) / "downloads"
        self.root.mkdir()

        self.rules: Dict[str, FrozenSet[str]] = {
            "audio": frozenset({".mp3"}),
            "video": frozenset({".mp4"}),
            "image": frozenset({".jpg"}),
            "document": frozenset({".pdf"}),
            "archive": frozenset({".zip"}),
        }
        self.fixed_now = datetime(2024, 3, 5, 14, 30, 0)

    def _create_files(self, *names: str, directory: Optional[Path] = None) -> List[Path]:
        """Creates small files named `names` and returns their paths."""
        directory = directory or self.root
        paths = []
        for name in names:
            path = directory / name
            path.write_bytes(f"content of {name}".encode("utf-8"))
            paths.append(path)
        return paths

    def _snapshot(self, directory: Optional[Path] = None) -> List[Tuple[str, bytes]]:
        """Returns every file below `directory` with its content, in a stable order."""
        directory = directory or self.root
        return sorted(
            (str(path.relative_to(directory)), path.read_bytes())
            for path in directory.rglob('*') if path.is_file()
        )

    def _make_organizer(self, directory: Optional[Path] = None, mime: bool = False, **option_kwargs) -> FileOrganizer:
        """
        Builds a FileOrganizer over `directory` (default `self.root`).

        Unless `mime` is True, the MIME fallback is stubbed out so results do
        not depend on the platform's MIME type table.
        """
        options = OrganizeOptions(**option_kwargs)
        resolver = None if mime else CategoryResolver(self.rules, guess_type=no_mime_type)
        return FileOrganizer(directory or self.root, self.rules, options,
                             clock=lambda: self.fixed_now, resolver=resolver)
