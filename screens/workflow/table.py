# screens/workflow/table.py
"""
Shared table renderer for the workflow tabs and the HOD portal.

Layout: search box, sort controls, a filter panel that opens like a modal,
then the projected rows. All view changes go through the reducer.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

import pandas as pd
import streamlit as st

from core.projection import ProjectionPipeline
from core.records import Record
from core.ui import empty_result, loading_placeholder
from core.view_state import (
    ApplyFilters, ClearFilters, CloseFilterModal, OpenFilterModal,
    SelectFilter, SetSearch, SetSortField, ToggleSortDirection,
)
from screens.workflow.state import dispatch, get_view

Column = Tuple[str, str]  # (record field, header)


def _widget_key(table_key: str, name: str) -> str:
    return f"{table_key}__{name}"


def _seed(key: str, value, choices: Optional[Sequence[str]] = None):
    """Give a widget its starting value through session_state (once, or when its value left the choices)."""
    if key not in st.session_state or (choices is not None and st.session_state[key] not in choices):
        st.session_state[key] = value if choices is None or value in choices else choices[0]


def _configured_page_size() -> int:
    settings = st.session_state.get("settings")
    return settings.portal.page_size if settings else 50


def _on_search(table_key: str, pipeline: ProjectionPipeline):
    term = st.session_state.get(_widget_key(table_key, "search"), "")
    dispatch(table_key, pipeline.config, SetSearch(term))


def _on_filter(table_key: str, pipeline: ProjectionPipeline, name: str):
    value = st.session_state.get(_widget_key(table_key, f"filter_{name}"))
    dispatch(table_key, pipeline.config, SelectFilter(name, value))


def _on_sort_field(table_key: str, pipeline: ProjectionPipeline):
    dispatch(table_key, pipeline.config, SetSortField(st.session_state[_widget_key(table_key, "sort_field")]))


def _on_clear(table_key: str, pipeline: ProjectionPipeline):
    state = dispatch(table_key, pipeline.config, ClearFilters())
    # keep the widgets in step with the cleared state
    st.session_state[_widget_key(table_key, "search")] = state.search_term
    for name, value in state.selected_filters.items():
        st.session_state[_widget_key(table_key, f"filter_{name}")] = value


def _render_controls(table_key: str, pipeline: ProjectionPipeline, records: Optional[Iterable[Record]], scope: Optional[str]):
    cfg = pipeline.config
    state = get_view(table_key, cfg)

    c1, c2, c3, c4 = st.columns([0.45, 0.25, 0.12, 0.18])
    with c1:
        _seed(_widget_key(table_key, "search"), state.search_term)
        st.text_input(
            "Search",
            key=_widget_key(table_key, "search"),
            placeholder="Search by name, application no or department",
            on_change=_on_search, args=(table_key, pipeline),
            label_visibility="collapsed",
        )
    with c2:
        sort_fields = list(cfg.sort_fields or (cfg.default_sort_field,))
        _seed(_widget_key(table_key, "sort_field"), state.sort_field, sort_fields)
        st.selectbox(
            "Sort by",
            sort_fields,
            key=_widget_key(table_key, "sort_field"),
            on_change=_on_sort_field, args=(table_key, pipeline),
            label_visibility="collapsed",
        )
    with c3:
        if st.button(state.sort_label, key=_widget_key(table_key, "sort_dir"), width="stretch"):
            dispatch(table_key, cfg, ToggleSortDirection())
            st.rerun()
    with c4:
        label = "🔎 Filters •" if state.is_filtered(cfg) else "🔎 Filters"
        if st.button(label, key=_widget_key(table_key, "open_filters"), width="stretch"):
            dispatch(table_key, cfg, OpenFilterModal())
            st.rerun()

    if not state.filter_modal_open:
        return

    options = pipeline.filter_options(records, scope)
    with st.container(border=True):
        st.markdown("**Filter records**")
        cols = st.columns(max(len(cfg.dimensions), 1))
        for col, dim in zip(cols, cfg.dimensions):
            choices = options.get(dim.name) or [dim.all_value]
            current = state.selected_filters.get(dim.name, dim.all_value)
            _seed(_widget_key(table_key, f"filter_{dim.name}"), current, choices)
            with col:
                st.selectbox(
                    dim.label,
                    choices,
                    key=_widget_key(table_key, f"filter_{dim.name}"),
                    on_change=_on_filter, args=(table_key, pipeline, dim.name),
                )
        b1, b2, b3 = st.columns(3)
        with b1:
            if st.button("Apply", type="primary", key=_widget_key(table_key, "apply"), width="stretch"):
                dispatch(table_key, cfg, ApplyFilters())
                st.rerun()
        with b2:
            st.button(
                "Clear Filters", key=_widget_key(table_key, "clear"), width="stretch",
                on_click=_on_clear, args=(table_key, pipeline),
            )
        with b3:
            if st.button("Close", key=_widget_key(table_key, "close"), width="stretch"):
                dispatch(table_key, cfg, CloseFilterModal())
                st.rerun()


def to_frame(rows: Sequence[Record], columns: Sequence[Column]) -> pd.DataFrame:
    return pd.DataFrame(
        [{header: r.text(field) or "-" for field, header in columns} for r in rows],
        columns=[header for _, header in columns],
    )


def render_table(
    table_key: str,
    pipeline: ProjectionPipeline,
    records: Optional[List[Record]],
    scope: Optional[str],
    columns: Sequence[Column],
    page_size: Optional[int] = None,
) -> Optional[List[Record]]:
    """Draw controls plus rows; returns the visible rows (None while loading)."""
    _render_controls(table_key, pipeline, records, scope)

    if records is None:
        loading_placeholder()
        return None

    visible = pipeline.project(records, scope, get_view(table_key, pipeline.config))
    if not visible:
        empty_result(scope)
        return visible

    page_size = page_size or _configured_page_size()
    pages = max(1, -(-len(visible) // page_size))
    page = 1
    if pages > 1:
        page = int(st.number_input("Page", min_value=1, max_value=pages, value=1, key=_widget_key(table_key, "page")))
    start = (page - 1) * page_size
    st.caption(f"Showing {len(visible)} of {len(pipeline.scoped(records, scope))} record(s)")
    st.dataframe(to_frame(visible[start:start + page_size], columns), width="stretch", hide_index=True)
    return visible
