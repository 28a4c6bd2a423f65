"""Settings model for prefsync.

Provides immutable appearance snapshots, the choice lists a view offers,
and validation for the settings session. This module is GUI-agnostic.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any

from prefsync import options
from prefsync.options import (
    DEFAULT_TRANSLATION,
    TRUNCATE_PATH_DISPLAY_ORDER,
    AvatarFallbackType,
    AvatarProvider,
    RefsSortBy,
    RefsSortOrder,
    TruncatePathMethod,
)


@dataclass(frozen=True)
class AppearanceSnapshot:
    """Immutable editable state of all appearance options.

    Values are held in engine form: enum options are enum members, or None
    when the stored value was not recognized (no selection); the truncation
    option is a display index; the dictionary is a name, or None for no
    selection. Persisted forms ("none", enum strings) never appear here.

    Example:
        >>> snap = AppearanceSnapshot()
        >>> new_snap = snap.with_changes(avatar_provider=AvatarProvider.CUSTOM)
        >>> snap.diff(new_snap)
        {'avatar_provider'}
    """

    # General
    enable_auto_scale: bool = True
    truncate_path_index: int = 0
    show_repo_current_branch: bool = True
    show_current_branch_in_visual_studio: bool = True
    relative_date: bool = True

    # Branches and revisions
    refs_sort_order: RefsSortOrder | None = RefsSortOrder.ASCENDING
    refs_sort_by: RefsSortBy | None = RefsSortBy.DEFAULT
    sort_by_author_date: bool = False

    # Author images
    show_avatar_in_commit_info: bool = True
    show_avatar_column: bool = True
    avatar_cache_days: int = 13
    avatar_provider: AvatarProvider | None = AvatarProvider.DEFAULT
    avatar_fallback_type: AvatarFallbackType | None = AvatarFallbackType.GRAVATAR
    custom_avatar_template: str = ""

    # Language
    translation: str = DEFAULT_TRANSLATION
    dictionary: str | None = None

    @property
    def truncate_path_method(self) -> TruncatePathMethod:
        """Truncation method the display index stands for."""
        return options.index_to_truncate_method(self.truncate_path_index)

    @property
    def shows_custom_avatar_template(self) -> bool:
        """Whether the custom template field applies (Custom provider only)."""
        return self.avatar_provider is AvatarProvider.CUSTOM

    def with_changes(self, **kwargs: Any) -> AppearanceSnapshot:
        """Create a new snapshot with specified fields changed.

        Args:
            **kwargs: Field names and new values.

        Returns:
            New AppearanceSnapshot with changes applied.

        Raises:
            TypeError: If a field name is unknown.
        """
        return dataclasses.replace(self, **kwargs)

    def diff(self, other: AppearanceSnapshot) -> set[str]:
        """Find fields that differ between this snapshot and another.

        Args:
            other: Another AppearanceSnapshot to compare against.

        Returns:
            Set of field names that have different values.
        """
        return {
            f.name
            for f in dataclasses.fields(self)
            if getattr(self, f.name) != getattr(other, f.name)
        }


# Snapshot field -> option key
SNAPSHOT_FIELDS: dict[str, str] = {
    "enable_auto_scale": options.ENABLE_AUTO_SCALE,
    "truncate_path_index": options.TRUNCATE_PATH_METHOD,
    "show_repo_current_branch": options.SHOW_REPO_CURRENT_BRANCH,
    "show_current_branch_in_visual_studio": options.SHOW_CURRENT_BRANCH_IN_VISUAL_STUDIO,
    "relative_date": options.RELATIVE_DATE,
    "refs_sort_order": options.REFS_SORT_ORDER,
    "refs_sort_by": options.REFS_SORT_BY,
    "sort_by_author_date": options.SORT_BY_AUTHOR_DATE,
    "show_avatar_in_commit_info": options.SHOW_AVATAR_IN_COMMIT_INFO,
    "show_avatar_column": options.SHOW_AVATAR_COLUMN,
    "avatar_cache_days": options.AVATAR_CACHE_DAYS,
    "avatar_provider": options.AVATAR_PROVIDER,
    "avatar_fallback_type": options.AVATAR_FALLBACK_TYPE,
    "custom_avatar_template": options.CUSTOM_AVATAR_TEMPLATE,
    "translation": options.TRANSLATION,
    "dictionary": options.DICTIONARY,
}


@dataclass(frozen=True)
class AppearanceChoices:
    """Choice lists offered for the enumerated options.

    Enum lists always hold every member in declared order, whatever the
    store contains. dictionaries[0] is always the no-selection entry (None).
    translations[0] is always "English".
    """

    truncate_path_methods: tuple[TruncatePathMethod, ...] = TRUNCATE_PATH_DISPLAY_ORDER
    refs_sort_orders: tuple[RefsSortOrder, ...] = tuple(RefsSortOrder)
    refs_sort_by: tuple[RefsSortBy, ...] = tuple(RefsSortBy)
    avatar_providers: tuple[AvatarProvider, ...] = tuple(AvatarProvider)
    avatar_fallback_types: tuple[AvatarFallbackType, ...] = tuple(AvatarFallbackType)
    dictionaries: tuple[str | None, ...] = (None,)
    dictionary_index: int = 0
    translations: tuple[str, ...] = (DEFAULT_TRANSLATION,)
    translation_index: int | None = 0


@dataclass
class ValidationResult:
    """Result of settings validation.

    Attributes:
        is_valid: True if all settings are valid.
        errors: Dict mapping field names to error messages.
    """

    is_valid: bool = True
    errors: dict[str, str] = field(default_factory=dict)

    def add_error(self, field: str, message: str) -> None:
        """Add a validation error.

        Args:
            field: Name of the invalid field.
            message: Human-readable error message.
        """
        self.errors[field] = message
        self.is_valid = False


MIN_AVATAR_CACHE_DAYS = 1
MAX_AVATAR_CACHE_DAYS = 365

_UNSAFE_TEMPLATE_CHARS = {"\n", "\r", "\t", "\x00"}


class SnapshotValidator:
    """Validates a snapshot before commit - blocks commit if ANY field is invalid.

    Example:
        >>> result = SnapshotValidator.validate(snapshot)
        >>> if not result.is_valid:
        ...     for field, error in result.errors.items():
        ...         print(f"{field}: {error}")
    """

    @classmethod
    def validate(cls, settings: AppearanceSnapshot) -> ValidationResult:
        """Validate all settings.

        Args:
            settings: Snapshot to validate.

        Returns:
            ValidationResult with is_valid=False if any field is invalid.
        """
        result = ValidationResult()

        days = settings.avatar_cache_days
        if isinstance(days, bool) or not isinstance(days, int):
            result.add_error("avatar_cache_days", "Cache days must be a whole number")
        elif not MIN_AVATAR_CACHE_DAYS <= days <= MAX_AVATAR_CACHE_DAYS:
            result.add_error(
                "avatar_cache_days",
                f"Cache days must be between {MIN_AVATAR_CACHE_DAYS} and {MAX_AVATAR_CACHE_DAYS}",
            )

        index = settings.truncate_path_index
        if isinstance(index, bool) or not isinstance(index, int):
            result.add_error("truncate_path_index", "Truncation choice must be an index")

        cls._validate_template(settings, result)

        if not isinstance(settings.translation, str):
            result.add_error("translation", "Language must be text")

        return result

    @classmethod
    def _validate_template(
        cls, settings: AppearanceSnapshot, result: ValidationResult
    ) -> None:
        """Validate the custom avatar template.

        Args:
            settings: Settings to validate.
            result: ValidationResult to add errors to.
        """
        template = settings.custom_avatar_template
        if not isinstance(template, str):
            result.add_error("custom_avatar_template", "Template must be text")
            return

        if any(c in _UNSAFE_TEMPLATE_CHARS for c in template):
            result.add_error(
                "custom_avatar_template",
                "Template contains control characters",
            )
