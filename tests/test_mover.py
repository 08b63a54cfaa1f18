from unittest.mock import patch

from dirsort.errors import MoveError
from dirsort.mover import Mover
from dirsort.tree import DirectoryTree

from .base_test import BaseOrganizerTest


class TestMover(BaseOrganizerTest):
    """Tests for live and simulated file moves."""

    # --- Live Mode ---
    def test_move_creates_destination_and_renames_file(self):
        source, = self._create_files("song.mp3")
        destination_dir = self.root / "audio"

        result = Mover().move(source, destination_dir, "song.mp3", dry_run=False)

        self.assertTrue(result.ok)
        self.assertFalse(result.simulated)
        self.assertEqual(result.destination, destination_dir / "song.mp3")
        self.assertFalse(source.exists())
        self.assertEqual((destination_dir / "song.mp3").read_bytes(), b"content of song.mp3")

    def test_move_into_existing_directory(self):
        source, = self._create_files("song.mp3")
        (self.root / "audio").mkdir()

        Mover().move(source, self.root / "audio", "2024-03-05_song.mp3", dry_run=False)

        self.assertTrue((self.root / "audio" / "2024-03-05_song.mp3").is_file())

    def test_move_overwrites_existing_destination(self):
        """Duplicate destination names are not resolved: the last move wins."""
        source, = self._create_files("song.mp3")
        (self.root / "audio").mkdir()
        (self.root / "audio" / "song.mp3").write_bytes(b"old")

        Mover().move(source, self.root / "audio", "song.mp3", dry_run=False)

        self.assertEqual((self.root / "audio" / "song.mp3").read_bytes(), b"content of song.mp3")

    def test_move_missing_source_raises_moveerror(self):
        with self.assertRaises(MoveError) as ctx:
            Mover().move(self.root / "ghost.mp3", self.root / "audio", "ghost.mp3", dry_run=False)

        self.assertIsInstance(ctx.exception, OSError)
        self.assertIsInstance(ctx.exception.cause, FileNotFoundError)
        self.assertEqual(ctx.exception.destination, self.root / "audio" / "ghost.mp3")

    def test_move_raises_moveerror_when_directory_cannot_be_created(self):
        """A regular file occupying the category name blocks the move."""
        source, = self._create_files("song.mp3")
        self._create_files("audio")

        with self.assertRaises(MoveError) as ctx:
            Mover().move(source, self.root / "audio", "song.mp3", dry_run=False)

        self.assertIsInstance(ctx.exception.cause, FileExistsError)
        self.assertTrue(source.exists())

    def test_move_surfaces_rename_failure_without_copy_fallback(self):
        source, = self._create_files("song.mp3")
        cross_device = OSError(18, "Invalid cross-device link")

        with patch.object(type(source), "replace", side_effect=cross_device):
            with self.assertRaises(MoveError) as ctx:
                Mover().move(source, self.root / "audio", "song.mp3", dry_run=False)

        self.assertIs(ctx.exception.cause, cross_device)
        self.assertTrue(source.exists())

    # --- Dry-run Mode ---
    def test_dry_run_records_destination_without_touching_filesystem(self):
        source, = self._create_files("song.mp3")
        before = self._snapshot()
        tree = DirectoryTree(self.root)

        result = Mover(tree).move(source, self.root / "audio", "song.mp3", dry_run=True)

        self.assertTrue(result.simulated)
        self.assertEqual(self._snapshot(), before)
        self.assertFalse((self.root / "audio").exists())
        self.assertTrue(tree.find_node("audio/song.mp3").is_file)

    def test_dry_run_without_tree_raises_valueerror(self):
        source, = self._create_files("song.mp3")
        with self.assertRaises(ValueError):
            Mover().move(source, self.root / "audio", "song.mp3", dry_run=True)
