# screens/workflow/state.py
"""Binds a ViewState to st.session_state so each table keeps its view across reruns."""
from __future__ import annotations

import streamlit as st

from core.projection import PipelineConfig
from core.view_state import Action, ViewState, reduce


def _key(table_key: str) -> str:
    return f"view_state::{table_key}"


def get_view(table_key: str, config: PipelineConfig) -> ViewState:
    key = _key(table_key)
    if key not in st.session_state:
        st.session_state[key] = ViewState.initial(config)
    return st.session_state[key]


def dispatch(table_key: str, config: PipelineConfig, action: Action) -> ViewState:
    state = reduce(get_view(table_key, config), action, config)
    st.session_state[_key(table_key)] = state
    return state


def reset_view(table_key: str):
    st.session_state.pop(_key(table_key), None)
