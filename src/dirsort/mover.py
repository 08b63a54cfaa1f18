import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import MoveError
from .tree import DirectoryTree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveResult:
    """Outcome of moving (or simulating the move of) a single file."""

    source_path: Path
    destination: Path
    simulated: bool = False
    error: Optional[MoveError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Mover:
    """
    Moves files into their category directory.

    In dry-run mode the filesystem is left untouched and the destination is
    recorded in `tree` instead, so the planned layout can be displayed
    afterwards.
    """

    def __init__(self, tree: Optional[DirectoryTree] = None):
        self.tree = tree

    def move(self, source_path: Path, destination_dir: Path, final_name: str, dry_run: bool) -> MoveResult:
        """
        Moves `source_path` to `destination_dir / final_name`.

        Raises:
            MoveError: If the destination directory cannot be created or the
                       rename fails (missing source, permissions, a file in
                       the way, a cross-device link...). No copy fallback is
                       attempted.
        """
        destination = destination_dir / final_name

        if dry_run:
            if self.tree is None:
                raise ValueError("A DirectoryTree is required to record dry-run moves.")
            self.tree.add_file(destination)
            return MoveResult(source_path, destination, simulated=True)

        try:
            destination_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise MoveError(source_path, destination, e) from e

        try:
            # replace() overwrites an existing destination on every platform.
            source_path.replace(destination)
        except OSError as e:
            raise MoveError(source_path, destination, e) from e

        return MoveResult(source_path, destination)
