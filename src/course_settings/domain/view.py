"""Pure mapping from session state to what the presentation layer should render."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from course_settings.domain.model import LoadState, SaveState, ValidationResult, ViewMode

type SubmitButtonState = Literal["default", "pending"]

_MODES: dict[LoadState, ViewMode] = {
    LoadState.IDLE: ViewMode.SPINNER,
    LoadState.LOADING: ViewMode.SPINNER,
    LoadState.LOADED: ViewMode.FORM,
    LoadState.CONNECTION_FAILED: ViewMode.CONNECTION_ERROR,
    LoadState.PERMISSION_DENIED: ViewMode.PERMISSION_ERROR,
}


def select_view(
    load_state: LoadState,
    save_state: SaveState,  # noqa: ARG001
    validation: ValidationResult,  # noqa: ARG001
) -> ViewMode:
    """Top-level render mode; only the load state decides it."""

    return _MODES[load_state]


def submit_button_state(save_state: SaveState) -> SubmitButtonState:
    return "pending" if save_state is SaveState.IN_PROGRESS else "default"


@dataclass(frozen=True, slots=True)
class SettingsView:
    mode: ViewMode
    save_state: SaveState
    validation: ValidationResult = field(default_factory=dict)
    submit_button: SubmitButtonState = "default"
    show_body: bool = False


def build_view(
    load_state: LoadState,
    save_state: SaveState,
    validation: ValidationResult,
    *,
    enabled: bool = False,
) -> SettingsView:
    mode = select_view(load_state, save_state, validation)
    if mode is not ViewMode.FORM:
        return SettingsView(mode=mode, save_state=save_state)
    return SettingsView(
        mode=mode,
        save_state=save_state,
        validation=dict(validation),
        submit_button=submit_button_state(save_state),
        show_body=enabled,
    )


__all__ = ["SettingsView", "SubmitButtonState", "build_view", "select_view", "submit_button_state"]
