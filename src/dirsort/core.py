import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from .errors import DirectoryReadError, MoveError
from .mover import Mover, MoveResult
from .naming import compute_name
from .resolver import CategoryResolver, CategoryRules
from .tree import DirectoryTree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrganizeOptions:
    """Settings for a single organize run."""

    prepend_date: bool = False
    dry_run: bool = False
    verbose: bool = False
    mime_fallback: bool = True


@dataclass(frozen=True)
class PlannedMove:
    """Where a single file is going: its category and its final name."""

    source_path: Path
    category: str
    final_name: str

    def destination_dir(self, root: Path) -> Path:
        return root / self.category


@dataclass
class OrganizeReport:
    """Aggregated outcome of an organize run."""

    directory: Path
    dry_run: bool
    moved: List[MoveResult] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    failed: List[MoveResult] = field(default_factory=list)
    tree: Optional[DirectoryTree] = None
    rendered_tree: Optional[str] = None

    @property
    def total_scanned(self) -> int:
        return len(self.moved) + len(self.skipped) + len(self.failed)

    @property
    def has_failures(self) -> bool:
        return any(not result.ok for result in self.failed)


class FileOrganizer:
    """
    Organizes the top-level files of a directory into category
    subdirectories of that same directory.

    Each file is categorized by extension (with a MIME-type fallback),
    optionally renamed with the current date and then moved, or, in dry-run
    mode, placed into a simulated `DirectoryTree`. Failures are collected
    per file: one unmovable file does not stop the run.
    """

    def __init__(self, directory: Path, rules: CategoryRules, options: Optional[OrganizeOptions] = None,
                 clock: Callable[[], datetime] = datetime.now,
                 resolver: Optional[CategoryResolver] = None):
        """
        Args:
            directory: The directory whose files are organized.
            rules: Mapping of category names to extension sets.
            options: Run settings; defaults to a live run without date prefix.
            clock: Returns the time used for date prefixes. Called once per run.
            resolver: Overrides the resolver built from `rules`.
        """
        self.directory = Path(directory)
        self.rules = rules
        self.options = options or OrganizeOptions()
        self.clock = clock
        self.resolver = resolver or CategoryResolver(rules, mime_fallback=self.options.mime_fallback)

        logger.debug(f"Organizer initialized for '{self.directory}' with {len(rules)} categories.")

    def organize(self) -> OrganizeReport:
        """
        Runs one organize pass over the directory.

        Returns:
            An `OrganizeReport` with the moved, skipped and failed files. In
            dry-run mode it also holds the simulated tree and its rendering.

        Raises:
            DirectoryReadError: If the directory cannot be listed.
        """
        dry_run = self.options.dry_run
        report = OrganizeReport(directory=self.directory, dry_run=dry_run)
        tree = DirectoryTree(self.directory) if dry_run else None
        mover = Mover(tree)
        now = self.clock()

        if self.options.verbose:
            logger.info(f"Starting organization in '{self.directory}'...")
            if dry_run:
                logger.info("Dry-run mode: no files will be moved.")

        for entry in self._list_entries():
            if entry.is_dir():
                continue
            self._process_file(entry, now, mover, report)

        if dry_run:
            report.tree = tree
            report.rendered_tree = tree.render()

        self._log_summary(report)
        return report

    def _list_entries(self) -> List[Path]:
        """Lists the directory's immediate entries, sorted by name."""
        try:
            return sorted(self.directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise DirectoryReadError(self.directory, e) from e

    def plan(self, file_path: Path, now: datetime) -> Optional[PlannedMove]:
        """Returns where `file_path` should go, or None when it has no category."""
        category = self.resolver.categorize(file_path)
        if category is None:
            return None
        final_name = compute_name(file_path.name, self.options.prepend_date, now)
        return PlannedMove(file_path, category, final_name)

    def _process_file(self, file_path: Path, now: datetime, mover: Mover, report: OrganizeReport) -> None:
        """Plans and executes the move of a single file, recording the outcome."""
        log = logger.info if self.options.verbose else logger.debug

        planned = self.plan(file_path, now)
        if planned is None:
            log(f"Ignoring file '{file_path.name}' (no matching category).")
            report.skipped.append(file_path)
            return

        try:
            result = mover.move(file_path, planned.destination_dir(self.directory),
                                planned.final_name, self.options.dry_run)
        except MoveError as e:
            logger.error(f"Could not move file {file_path.name}: {e}")
            report.failed.append(MoveResult(file_path, e.destination, error=e))
            return

        if result.simulated:
            log(f"[DRY RUN] Simulated move: '{file_path}' -> '{result.destination}'")
        else:
            log(f"Moved: '{file_path}' -> '{result.destination}'")
        report.moved.append(result)

    def _log_summary(self, report: OrganizeReport) -> None:
        """Logs a final summary of the organization process."""
        log_prefix = "Dry run finished." if report.dry_run else "Organization finished."
        logger.info(f"--- {log_prefix} ---")
        logger.info(f"Total files scanned: {report.total_scanned}")
        if report.dry_run:
            logger.info(f"Files that would be moved: {len(report.moved)}")
            logger.info(f"Distinct destinations in the simulated tree: {report.tree.file_count()}")
        else:
            logger.info(f"Files successfully moved: {len(report.moved)}")
        logger.info(f"Files left in place (no category): {len(report.skipped)}")
        if report.failed:
            logger.warning(f"Files that could not be moved: {len(report.failed)}")
