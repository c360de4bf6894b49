# core/view_state.py
"""
Per-screen view state for the workflow tables and the reducer that moves it.

The state is an immutable value. Screens keep the current value in
st.session_state and replace it with reduce(state, action, config) on every
user event.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Union

from core.projection import ASC, DESC, PipelineConfig


@dataclass(frozen=True)
class ViewState:
    search_term: str = ""
    selected_filters: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    sort_field: str = "application_no"
    sort_direction: str = ASC
    filter_modal_open: bool = False

    @staticmethod
    def initial(config: PipelineConfig) -> "ViewState":
        return ViewState(
            selected_filters=MappingProxyType(config.sentinels()),
            sort_field=config.default_sort_field,
        )

    def is_filtered(self, config: PipelineConfig) -> bool:
        return bool(self.search_term) or dict(self.selected_filters) != config.sentinels()

    @property
    def sort_label(self) -> str:
        return "A-Z" if self.sort_direction == ASC else "Z-A"


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SetSearch:
    term: str


@dataclass(frozen=True)
class SelectFilter:
    name: str
    value: str


@dataclass(frozen=True)
class ToggleSortDirection:
    pass


@dataclass(frozen=True)
class SetSortField:
    field: str


@dataclass(frozen=True)
class OpenFilterModal:
    pass


@dataclass(frozen=True)
class CloseFilterModal:
    pass


@dataclass(frozen=True)
class ApplyFilters:
    pass


@dataclass(frozen=True)
class ClearFilters:
    pass


Action = Union[
    SetSearch, SelectFilter, ToggleSortDirection, SetSortField,
    OpenFilterModal, CloseFilterModal, ApplyFilters, ClearFilters,
]


def reduce(state: ViewState, action: Action, config: PipelineConfig) -> ViewState:
    if isinstance(action, SetSearch):
        return replace(state, search_term=action.term or "")

    if isinstance(action, SelectFilter):
        config.dimension(action.name)  # raises on unknown names
        selections = dict(state.selected_filters)
        selections[action.name] = action.value
        return replace(state, selected_filters=MappingProxyType(selections))

    if isinstance(action, ToggleSortDirection):
        return replace(state, sort_direction=DESC if state.sort_direction == ASC else ASC)

    if isinstance(action, SetSortField):
        return replace(state, sort_field=action.field)

    if isinstance(action, OpenFilterModal):
        return replace(state, filter_modal_open=True)

    # Filters are applied live as they are selected; "apply" only closes the modal.
    if isinstance(action, (CloseFilterModal, ApplyFilters)):
        return replace(state, filter_modal_open=False)

    if isinstance(action, ClearFilters):
        return replace(
            state,
            search_term="",
            selected_filters=MappingProxyType(config.sentinels()),
        )

    raise TypeError(f"Unsupported view action: {action!r}")
