import logging
import mimetypes
from pathlib import Path
from typing import Callable, Dict, FrozenSet, Optional, Tuple, Union

logger = logging.getLogger(__name__)

CategoryRules = Dict[str, FrozenSet[str]]
MimeGuesser = Callable[[str], Tuple[Optional[str], Optional[str]]]

# Primary MIME type -> category used when no extension rule matches.
MIME_CATEGORY_MAP = {
    'image': "image",
    'audio': "audio",
    'video': "video",
    'application': "document",
}


def file_extension(file_name: Union[str, Path]) -> str:
    """Returns the lower-cased extension of `file_name`, including the dot."""
    return Path(file_name).suffix.lower()


class CategoryResolver:
    """
    Decides which category a file belongs to.

    Extension rules always take precedence. The MIME fallback is only
    consulted when no rule matches, and it is itself driven by the file
    name: file contents are never inspected.
    """

    def __init__(self, rules: CategoryRules, mime_fallback: bool = True,
                 guess_type: MimeGuesser = mimetypes.guess_type):
        """
        Args:
            rules: Mapping of category name to a set of extensions.
            mime_fallback: If False, `categorize` only uses `rules`.
            guess_type: Callable with the signature of `mimetypes.guess_type`.
        """
        self.rules = rules
        self.mime_fallback = mime_fallback
        self._guess_type = guess_type
        # Sorted once so overlapping extensions always resolve to the same category.
        self._ordered_categories = sorted(rules)

    def resolve(self, file_name: Union[str, Path]) -> Optional[str]:
        """Returns the first category (by name) whose extensions contain the file's extension."""
        extension = file_extension(file_name)
        if not extension:
            return None
        for category in self._ordered_categories:
            if extension in self.rules[category]:
                return category
        return None

    def resolve_by_mime_type(self, file_path: Union[str, Path]) -> Optional[str]:
        """Maps the file's guessed primary MIME type to a category, if any."""
        mime_type, _ = self._guess_type(Path(file_path).name)
        if not mime_type:
            return None
        primary_type = mime_type.split('/', 1)[0]
        return MIME_CATEGORY_MAP.get(primary_type)

    def categorize(self, file_path: Union[str, Path]) -> Optional[str]:
        category = self.resolve(Path(file_path).name)
        if category is not None:
            return category
        if not self.mime_fallback:
            return None

        category = self.resolve_by_mime_type(file_path)
        if category is not None:
            logger.debug(f"No extension rule for '{Path(file_path).name}'; MIME type suggests '{category}'.")
        return category
