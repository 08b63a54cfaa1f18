import logging
from pathlib import PurePath
from typing import Dict, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "│   "
SPACE = "    "


class DirectoryNode:
    """A single entry of a `DirectoryTree`: a directory or a file leaf."""

    def __init__(self, name: str, is_file: bool = False):
        self.name = name
        self.is_file = is_file
        self.children: Dict[str, "DirectoryNode"] = {}

    def sorted_children(self) -> List["DirectoryNode"]:
        return [self.children[name] for name in sorted(self.children)]

    def display_name(self) -> str:
        # A filesystem root such as '/' already ends with a separator.
        if self.is_file or self.name.endswith(("/", "\\")):
            return self.name
        return f"{self.name}/"

    def __repr__(self) -> str:
        kind = "file" if self.is_file else "dir"
        return f"DirectoryNode({self.name!r}, {kind}, children={len(self.children)})"


class DirectoryTree:
    """
    In-memory model of a directory layout, used to preview a dry run.

    The tree is rooted at `root_path`. Files are added by path, either
    absolute (and then below `root_path`) or relative to the root, and
    intermediate directories are created on the way. Nothing here touches
    the filesystem.
    """

    def __init__(self, root_path: Union[str, PurePath]):
        self.root_path = PurePath(root_path)
        self.root = DirectoryNode(self.root_path.name or str(self.root_path))

    def _segments(self, path: Union[str, PurePath]) -> Tuple[str, ...]:
        """Splits `path` into the segments below the tree root."""
        pure_path = PurePath(path)
        try:
            relative = pure_path.relative_to(self.root_path)
        except ValueError:
            if pure_path.is_absolute():
                raise ValueError(f"Path '{pure_path}' is outside of the tree rooted at '{self.root_path}'")
            relative = pure_path
        return tuple(part for part in relative.parts if part not in ("", "."))

    def add_file(self, path: Union[str, PurePath]) -> DirectoryNode:
        """
        Registers a file in the tree and returns its leaf node.

        Adding the same path again is a no-op: children are keyed by name,
        so no duplicate entry is created.
        """
        segments = self._segments(path)
        if not segments:
            raise ValueError(f"Cannot add the tree root '{self.root_path}' as a file")

        current = self.root
        last_index = len(segments) - 1
        for index, segment in enumerate(segments):
            child = current.children.get(segment)
            if child is None:
                child = DirectoryNode(segment, is_file=index == last_index)
                current.children[segment] = child
            current = child
        logger.debug(f"Added '{'/'.join(segments)}' to the simulated tree.")
        return current

    def find_node(self, path: Union[str, PurePath]) -> Optional[DirectoryNode]:
        """Returns the node addressed by `path`, or None if any segment is missing."""
        try:
            segments = self._segments(path)
        except ValueError:
            return None

        current = self.root
        for segment in segments:
            current = current.children.get(segment)
            if current is None:
                return None
        return current

    def render(self, root_path: Optional[Union[str, PurePath]] = None) -> str:
        """
        Renders the subtree at `root_path` (the whole tree by default) as text.

        Children are listed in name order so the same set of files always
        produces the same output. Example:

            downloads/
            ├── audio/
            │   └── song.mp3
            └── image/
                └── photo.jpg
        """
        node = self.root if root_path is None else self.find_node(root_path)
        if node is None:
            return f"Directory {root_path} not found in the tree."

        lines = [node.display_name()]
        self._render_children(node, "", lines)
        return "\n".join(lines)

    def _render_children(self, node: DirectoryNode, prefix: str, lines: List[str]) -> None:
        children = node.sorted_children()
        for index, child in enumerate(children):
            is_last = index == len(children) - 1
            lines.append(f"{prefix}{LAST_BRANCH if is_last else BRANCH}{child.display_name()}")
            if child.children:
                self._render_children(child, prefix + (SPACE if is_last else PIPE), lines)

    def file_count(self) -> int:
        """Number of file leaves in the tree."""
        count = 0
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node.is_file:
                count += 1
            stack.extend(node.children.values())
        return count
