"""Configuration type definitions and defaults for prefsync."""

from typing import TypedDict


class AppearanceConfig(TypedDict, total=False):
    """General appearance settings."""

    enable_auto_scale: bool
    truncate_path_method: str  # "none", "compact", "trimStart", "fileNameOnly"
    show_repo_current_branch: bool
    show_current_branch_in_visual_studio: bool
    relative_date: bool


class BranchesConfig(TypedDict, total=False):
    """Branch list ordering."""

    sort_order: str  # "Ascending" or "Descending"
    sort_by: str


class RevisionsConfig(TypedDict, total=False):
    """Revision graph settings."""

    sort_by_author_date: bool


class AvatarsConfig(TypedDict, total=False):
    """Author avatar settings."""

    show_in_commit_info: bool
    show_column: bool
    cache_days: int
    provider: str  # "Default", "Custom" or "None"
    fallback_type: str
    custom_template: str  # URL template, e.g. "https://x/{hash}"


class LanguageConfig(TypedDict, total=False):
    """Localization settings."""

    translation: str  # "English" or an installed translation name
    dictionary: str  # Dictionary name without ".dic", or "none"


class PathsConfig(TypedDict, total=False):
    """Collaborator directories. Empty means the platform default."""

    dictionary_dir: str
    translations_dir: str
    avatar_cache_dir: str


class Config(TypedDict, total=False):
    """Full application configuration."""

    appearance: AppearanceConfig
    branches: BranchesConfig
    revisions: RevisionsConfig
    avatars: AvatarsConfig
    language: LanguageConfig
    paths: PathsConfig


DEFAULT_CONFIG: Config = {
    "appearance": {
        "enable_auto_scale": True,
        "truncate_path_method": "none",
        "show_repo_current_branch": True,
        "show_current_branch_in_visual_studio": True,
        "relative_date": True,
    },
    "branches": {
        "sort_order": "Ascending",
        "sort_by": "Default",
    },
    "revisions": {
        "sort_by_author_date": False,
    },
    "avatars": {
        "show_in_commit_info": True,
        "show_column": True,
        "cache_days": 13,
        "provider": "Default",
        "fallback_type": "Gravatar",
        "custom_template": "",
    },
    "language": {
        "translation": "English",
        "dictionary": "none",
    },
    "paths": {
        "dictionary_dir": "",
        "translations_dir": "",
        "avatar_cache_dir": "",
    },
}
