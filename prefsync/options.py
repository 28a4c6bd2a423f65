"""Option catalog for prefsync.

This module contains the fixed schema of appearance options:
- Enumerations persisted by the settings store
- OptionKind: semantic type of each option
- OptionSpec: key, kind, default and invalidation flags of one option
- OPTIONS: Dictionary mapping option key to OptionSpec
- The versioned display table for the path truncation option

Keys are dotted paths into the settings document ("avatars.provider").
They are stable across sessions and must not be renamed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, Flag, auto
from typing import Any, TypeVar


class InvalidationFlags(Flag):
    """What needs to be invalidated when settings change."""

    NONE = 0
    AVATAR_CACHE = auto()  # Provider, fallback image or custom template changed


class TruncatePathMethod(Enum):
    """How long file paths are shortened for display."""

    NONE = "none"
    COMPACT = "compact"
    TRIM_START = "trimStart"
    FILE_NAME_ONLY = "fileNameOnly"


class RefsSortOrder(Enum):
    """Sort direction of branches and tags."""

    ASCENDING = "Ascending"
    DESCENDING = "Descending"


class RefsSortBy(Enum):
    """Field branches and tags are sorted by."""

    DEFAULT = "Default"
    AUTHOR_DATE = "authordate"
    COMMITTER_DATE = "committerdate"
    CREATOR_DATE = "creatordate"
    TAGGER_DATE = "taggerdate"
    REF_NAME = "refname"


class AvatarProvider(Enum):
    """Source of user avatar images."""

    DEFAULT = "Default"  # GitHub and Gravatar
    CUSTOM = "Custom"  # User-supplied URL templates
    NONE = "None"  # Avatars disabled


class AvatarFallbackType(Enum):
    """Image shown when the provider has none for an email address."""

    AUTHOR_INITIALS = "AuthorInitials"
    GRAVATAR = "Gravatar"
    IDENTICON = "Identicon"
    MONSTER_ID = "MonsterId"
    WAVATAR = "Wavatar"
    RETRO = "Retro"
    ROBOHASH = "Robohash"


class OptionKind(Enum):
    """Semantic type of an option."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    ENUM_CHOICE = "enum_choice"
    INDEXED_CHOICE = "indexed_choice"  # Edited as a display index, stored as an enum
    FREE_TEXT = "free_text"
    FILE_BACKED_CHOICE = "file_backed_choice"


@dataclass(frozen=True)
class OptionSpec:
    """Catalog entry for a single option.

    Attributes:
        key: Dotted settings key, fixed at definition time.
        kind: Semantic type of the option.
        default: Persisted default value.
        enum_type: Enumeration backing ENUM_CHOICE and INDEXED_CHOICE options.
        invalidates: What must be invalidated when the option changes.
    """

    key: str
    kind: OptionKind
    default: Any
    enum_type: type[Enum] | None = None
    invalidates: InvalidationFlags = InvalidationFlags.NONE

    @property
    def section(self) -> str:
        return self.key.split(".", 1)[0]

    @property
    def name(self) -> str:
        return self.key.split(".", 1)[1]


# Persisted representation of "no selection" for file-backed choices
SENTINEL_PERSISTED = "none"

# First entry of the translation list, always offered
DEFAULT_TRANSLATION = "English"


ENABLE_AUTO_SCALE = "appearance.enable_auto_scale"
TRUNCATE_PATH_METHOD = "appearance.truncate_path_method"
SHOW_REPO_CURRENT_BRANCH = "appearance.show_repo_current_branch"
SHOW_CURRENT_BRANCH_IN_VISUAL_STUDIO = "appearance.show_current_branch_in_visual_studio"
RELATIVE_DATE = "appearance.relative_date"
REFS_SORT_ORDER = "branches.sort_order"
REFS_SORT_BY = "branches.sort_by"
SORT_BY_AUTHOR_DATE = "revisions.sort_by_author_date"
SHOW_AVATAR_IN_COMMIT_INFO = "avatars.show_in_commit_info"
SHOW_AVATAR_COLUMN = "avatars.show_column"
AVATAR_CACHE_DAYS = "avatars.cache_days"
AVATAR_PROVIDER = "avatars.provider"
AVATAR_FALLBACK_TYPE = "avatars.fallback_type"
CUSTOM_AVATAR_TEMPLATE = "avatars.custom_template"
TRANSLATION = "language.translation"
DICTIONARY = "language.dictionary"


# Define the catalog
# When adding a new option, add it here and to the snapshot field map
OPTIONS: dict[str, OptionSpec] = {
    spec.key: spec
    for spec in (
        OptionSpec(ENABLE_AUTO_SCALE, OptionKind.BOOLEAN, True),
        OptionSpec(
            TRUNCATE_PATH_METHOD,
            OptionKind.INDEXED_CHOICE,
            TruncatePathMethod.NONE.value,
            enum_type=TruncatePathMethod,
        ),
        OptionSpec(SHOW_REPO_CURRENT_BRANCH, OptionKind.BOOLEAN, True),
        OptionSpec(SHOW_CURRENT_BRANCH_IN_VISUAL_STUDIO, OptionKind.BOOLEAN, True),
        OptionSpec(RELATIVE_DATE, OptionKind.BOOLEAN, True),
        OptionSpec(
            REFS_SORT_ORDER,
            OptionKind.ENUM_CHOICE,
            RefsSortOrder.ASCENDING.value,
            enum_type=RefsSortOrder,
        ),
        OptionSpec(
            REFS_SORT_BY,
            OptionKind.ENUM_CHOICE,
            RefsSortBy.DEFAULT.value,
            enum_type=RefsSortBy,
        ),
        OptionSpec(SORT_BY_AUTHOR_DATE, OptionKind.BOOLEAN, False),
        OptionSpec(SHOW_AVATAR_IN_COMMIT_INFO, OptionKind.BOOLEAN, True),
        OptionSpec(SHOW_AVATAR_COLUMN, OptionKind.BOOLEAN, True),
        OptionSpec(AVATAR_CACHE_DAYS, OptionKind.INTEGER, 13),
        OptionSpec(
            AVATAR_PROVIDER,
            OptionKind.ENUM_CHOICE,
            AvatarProvider.DEFAULT.value,
            enum_type=AvatarProvider,
            invalidates=InvalidationFlags.AVATAR_CACHE,
        ),
        OptionSpec(
            AVATAR_FALLBACK_TYPE,
            OptionKind.ENUM_CHOICE,
            AvatarFallbackType.GRAVATAR.value,
            enum_type=AvatarFallbackType,
            invalidates=InvalidationFlags.AVATAR_CACHE,
        ),
        OptionSpec(
            CUSTOM_AVATAR_TEMPLATE,
            OptionKind.FREE_TEXT,
            "",
            invalidates=InvalidationFlags.AVATAR_CACHE,
        ),
        OptionSpec(TRANSLATION, OptionKind.FREE_TEXT, DEFAULT_TRANSLATION),
        OptionSpec(DICTIONARY, OptionKind.FILE_BACKED_CHOICE, SENTINEL_PERSISTED),
    )
}

# Options whose combined before/after state decides the avatar cache clear
WATCHED_AVATAR_OPTIONS: tuple[str, ...] = tuple(
    key
    for key, spec in OPTIONS.items()
    if InvalidationFlags.AVATAR_CACHE in spec.invalidates
)


# Display order of the truncation choices. Bump the version whenever the
# order changes so persisted indices from older layouts can be migrated.
TRUNCATE_PATH_TABLE_VERSION = 1
TRUNCATE_PATH_DISPLAY_ORDER: tuple[TruncatePathMethod, ...] = (
    TruncatePathMethod.NONE,
    TruncatePathMethod.COMPACT,
    TruncatePathMethod.TRIM_START,
    TruncatePathMethod.FILE_NAME_ONLY,
)
_TRUNCATE_PATH_INDEX: dict[TruncatePathMethod, int] = {
    method: index for index, method in enumerate(TRUNCATE_PATH_DISPLAY_ORDER)
}


def truncate_method_to_index(method: TruncatePathMethod | None) -> int:
    """Map a truncation method to its display index.

    Args:
        method: Parsed truncation method, or None when the stored value was
            not recognized.

    Returns:
        Display index; 0 (NONE) for anything outside the table.
    """
    if method is None:
        return 0
    return _TRUNCATE_PATH_INDEX.get(method, 0)


def index_to_truncate_method(index: int) -> TruncatePathMethod:
    """Map a display index back to its truncation method.

    Args:
        index: Display index from the editable form.

    Returns:
        The matching method; NONE for any index outside the table.
    """
    if isinstance(index, bool) or not isinstance(index, int):
        return TruncatePathMethod.NONE
    if 0 <= index < len(TRUNCATE_PATH_DISPLAY_ORDER):
        return TRUNCATE_PATH_DISPLAY_ORDER[index]
    return TruncatePathMethod.NONE


E = TypeVar("E", bound=Enum)


def parse_enum(enum_type: type[E], raw: Any) -> E | None:
    """Parse a stored value into an enum member.

    Accepts members, exact values and case-insensitive values or names.
    Never raises: unrecognized input yields None.

    Args:
        enum_type: Enumeration to parse into.
        raw: Value read from the settings store.

    Returns:
        The matching member, or None.
    """
    if isinstance(raw, enum_type):
        return raw
    if not isinstance(raw, str):
        return None

    text = raw.strip()
    for member in enum_type:
        if member.value == text:
            return member

    folded = text.casefold()
    for member in enum_type:
        if str(member.value).casefold() == folded or member.name.casefold() == folded:
            return member
    return None


def get_option(key: str) -> OptionSpec:
    """Get the catalog entry for a key.

    Raises:
        KeyError: If the key is not part of the catalog.
    """
    return OPTIONS[key]
