"""Settings view protocol for prefsync.

Defines the interface that any appearance settings GUI must provide.
The controller talks to the view only through this interface, so the
sync engine works with any frontend (Qt, Tk, web) without modification.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Protocol

if TYPE_CHECKING:
    from prefsync.choices import FileBackedChoices
    from prefsync.settings.model import AppearanceChoices, AppearanceSnapshot, ValidationResult


class SettingsViewProtocol(Protocol):
    """Interface that any appearance settings GUI must implement.

    Callbacks:
        on_save_requested: Called when user clicks Save / OK.
        on_cancel_requested: Called when user clicks Cancel or closes the window.
        on_setting_changed: Called when any setting is modified (field, value).
    """

    # Callbacks set by controller
    on_save_requested: Callable[[], None] | None
    on_cancel_requested: Callable[[], None] | None
    on_setting_changed: Callable[[str, Any], None] | None

    def populate(self, settings: "AppearanceSnapshot", choices: "AppearanceChoices") -> None:
        """Fill the widgets with values and choice lists.

        The custom avatar template field should only be visible when
        settings.shows_custom_avatar_template is True.

        Args:
            settings: Snapshot to display.
            choices: Choice lists for the enumerated options.
        """
        ...

    def collect(self) -> "AppearanceSnapshot":
        """Collect current UI state into a snapshot.

        Returns:
            AppearanceSnapshot reflecting current UI values.
        """
        ...

    def set_dictionary_choices(self, choices: "FileBackedChoices") -> None:
        """Replace the dictionary list after a rescan.

        Args:
            choices: Rescanned dictionaries, no-selection entry first.
        """
        ...

    def set_dirty(self, is_dirty: bool) -> None:
        """Update the unsaved-changes indicator.

        Args:
            is_dirty: True if there are unsaved changes.
        """
        ...

    def show_validation_errors(self, result: "ValidationResult") -> None:
        """Display errors that blocked the commit.

        Args:
            result: Validation result with errors dict. A "_save" entry
                means the store rejected a write.
        """
        ...

    def show_warning(self, message: str) -> None:
        """Display a non-fatal warning; the session stays open.

        Args:
            message: Warning text.
        """
        ...

    def confirm_discard_changes(self) -> bool:
        """Ask user to confirm discarding unsaved changes.

        Returns:
            True if user confirms discard, False to cancel close.
        """
        ...

    def close(self) -> None:
        """Close the settings window."""
        ...

    def show(self) -> None:
        """Show the settings window."""
        ...
