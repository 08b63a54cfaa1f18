import json
import logging
from pathlib import Path
from typing import Callable, Dict, FrozenSet, Iterable, Mapping, Optional

from platformdirs import user_config_dir

from .errors import ConfigLoadError

logger = logging.getLogger(__name__)

# --- Application Constants ---
APP_NAME = "dirsort"
APP_AUTHOR = "dirsort"
CONFIG_FILE_NAME = "config.json"

# --- Default Category Skeleton ---
# Written when the user accepts to bootstrap a configuration file.
# Extension lists are left empty for the user to fill in.
DEFAULT_CATEGORIES = (
    "3d-model",
    "application",
    "archive",
    "audio",
    "document",
    "image",
    "presentation",
    "programming",
    "spreadsheet",
    "video",
)


def get_config_file_path() -> Path:
    """
    Determines the cross-platform path of the user's rules file.

    Uses `platformdirs` to find the user-specific config directory. The
    directory is not created here: `save_category_rules` does that when a
    file is actually written.

    Returns:
        A pathlib.Path object representing the full path to the config file.
    """
    config_dir = Path(user_config_dir(APP_NAME, APP_AUTHOR, roaming=True))
    return config_dir / CONFIG_FILE_NAME


def normalize_extension(extension: str) -> str:
    """Returns `extension` stripped, lower-cased and with a leading dot."""
    normalized = extension.strip().lower()
    if normalized and not normalized.startswith('.'):
        normalized = f".{normalized}"
    return normalized


def _parse_rules(raw: object, config_path: Path) -> Dict[str, FrozenSet[str]]:
    if not isinstance(raw, dict):
        raise ConfigLoadError(config_path, "top-level value must be an object mapping categories to extension lists")

    rules: Dict[str, FrozenSet[str]] = {}
    owners: Dict[str, str] = {}
    for category in sorted(raw):
        extensions = raw[category]
        if not isinstance(extensions, list):
            raise ConfigLoadError(config_path, f"extensions of category '{category}' must be a list")

        normalized_set = set()
        for extension in extensions:
            if not isinstance(extension, str):
                raise ConfigLoadError(config_path, f"invalid extension {extension!r} in category '{category}'")
            normalized = normalize_extension(extension)
            if not normalized:
                logger.warning(f"Ignoring empty extension in category '{category}'.")
                continue
            if normalized != extension:
                logger.warning(f"Extension '{extension}' in category '{category}' normalized to '{normalized}'.")
            if normalized in owners and owners[normalized] != category:
                logger.warning(
                    f"Extension '{normalized}' is listed in both '{owners[normalized]}' and '{category}'. "
                    f"'{owners[normalized]}' takes precedence."
                )
            else:
                owners[normalized] = category
            normalized_set.add(normalized)
        rules[category] = frozenset(normalized_set)
    return rules


def load_category_rules(config_path: Optional[Path] = None) -> Dict[str, FrozenSet[str]]:
    """
    Loads the category rules from a JSON file.

    The file holds an object mapping each category name to a list of
    extensions, e.g. {"audio": [".mp3", ".flac"]}.

    Args:
        config_path: The file to read. Defaults to `get_config_file_path()`.

    Returns:
        The rules, with every extension normalized (see `normalize_extension`).

    Raises:
        ConfigLoadError: If the file is missing, unreadable or malformed.
    """
    config_path = config_path or get_config_file_path()
    try:
        with config_path.open('r', encoding='utf-8') as f:
            raw = json.load(f)
    except FileNotFoundError as e:
        raise ConfigLoadError(config_path, "file not found", e) from e
    except json.JSONDecodeError as e:
        raise ConfigLoadError(config_path, "invalid JSON", e) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigLoadError(config_path, "file could not be read", e) from e

    rules = _parse_rules(raw, config_path)
    logger.info(f"Loaded {len(rules)} categories from {config_path}")
    return rules


def save_category_rules(rules: Mapping[str, Iterable[str]], config_path: Optional[Path] = None) -> None:
    """
    Saves the rules to a JSON file.

    The mapping is saved as a human-readable, indented JSON file with
    categories and extensions sorted.

    Args:
        rules: Mapping of category names to extensions.
        config_path: The file to write. Defaults to `get_config_file_path()`.

    Raises:
        OSError: If the directory or the file cannot be written.
    """
    config_path = config_path or get_config_file_path()
    serializable = {category: sorted(extensions) for category, extensions in rules.items()}
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open('w', encoding='utf-8') as f:
        json.dump(serializable, f, indent=4, sort_keys=True)
    logger.info(f"Category rules saved to {config_path}")


def default_skeleton() -> Dict[str, list]:
    return {category: [] for category in DEFAULT_CATEGORIES}


def ask_yes_no(prompt: str, input_func: Optional[Callable[[str], str]] = None) -> bool:
    """
    Asks `prompt` until the user answers 'y' or 'n'.

    A closed input stream (EOF) counts as 'n'.
    """
    input_func = input_func or input
    while True:
        try:
            answer = input_func(prompt).strip().lower()
        except EOFError:
            logger.warning("\nInput stream closed (EOF). Assuming 'n'.")
            return False

        if answer == 'y':
            return True
        if answer == 'n':
            return False
        logger.warning("Invalid input. Please enter 'y' for yes or 'n' for no.")


def ensure_config_file(config_path: Optional[Path] = None, input_func: Optional[Callable[[str], str]] = None) -> bool:
    """
    Offers to create an empty rules file when none exists yet.

    Returns:
        True if the rules file exists once this function returns.
    """
    config_path = config_path or get_config_file_path()
    if config_path.is_file():
        logger.debug(f"Configuration file found at {config_path}")
        return True

    logger.info(f"Configuration file not found at: {config_path}")
    if not ask_yes_no("Would you like to generate an empty version? (y/n): ", input_func):
        logger.info("No configuration file created.")
        return False

    try:
        save_category_rules(default_skeleton(), config_path)
    except OSError as e:
        logger.error(f"Error creating configuration file {config_path}: {e}")
        return False

    logger.info(f"Empty configuration created at: {config_path}. Add extensions to its categories to start organizing.")
    return True
