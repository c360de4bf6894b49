# core/theme.py
from __future__ import annotations
import copy
import logging
from typing import Dict, Optional
import streamlit as st

from core import config_store

log = logging.getLogger(__name__)

NAMESPACE = "ui_theme"

# Named palettes offered in Settings. Keys are CSS custom properties.
THEMES: Dict[str, Dict[str, object]] = {
    "default": {
        "name": "Default Blue",
        "colors": {
            "--primary-blue": "#1d4ed8",
            "--secondary-blue": "#3b82f6",
            "--surface": "#ffffff",
            "--text": "#111827",
            "--muted": "#6b7280",
        },
    },
    "ocean": {
        "name": "Ocean",
        "colors": {
            "--primary-blue": "#0e7490",
            "--secondary-blue": "#22d3ee",
            "--surface": "#f0fdff",
            "--text": "#083344",
            "--muted": "#64748b",
        },
    },
    "forest": {
        "name": "Forest",
        "colors": {
            "--primary-blue": "#15803d",
            "--secondary-blue": "#4ade80",
            "--surface": "#f7fee7",
            "--text": "#14532d",
            "--muted": "#6b7280",
        },
    },
    "sunset": {
        "name": "Sunset",
        "colors": {
            "--primary-blue": "#c2410c",
            "--secondary-blue": "#fb923c",
            "--surface": "#fff7ed",
            "--text": "#431407",
            "--muted": "#78716c",
        },
    },
    "dark": {
        "name": "Dark",
        "colors": {
            "--primary-blue": "#60a5fa",
            "--secondary-blue": "#93c5fd",
            "--surface": "#0f1116",
            "--text": "#e6e6e6",
            "--muted": "#9aa3b2",
        },
    },
}

DEFAULT_THEME = "default"

STATUS_BADGE_COLORS = {
    "Pending": ("#fef3c7", "#92400e"),
    "Query": ("#fed7aa", "#c2410c"),
    "Query Resolved": ("#dcfce7", "#166534"),
    "Approved": ("#d1fae5", "#065f46"),
    "Rejected": ("#fee2e2", "#991b1b"),
    "Scheduled": ("#dbeafe", "#1e40af"),
    "Completed": ("#d1fae5", "#065f46"),
    "Cancelled": ("#fee2e2", "#991b1b"),
}

def get_theme(name: Optional[str]) -> Dict[str, object]:
    return copy.deepcopy(THEMES.get(name or "", THEMES[DEFAULT_THEME]))

def load_theme_preference(engine, email: Optional[str], default: str = DEFAULT_THEME) -> str:
    if not (engine and email):
        return default
    name = config_store.get(engine, email.lower(), NAMESPACE).get("name")
    return name if name in THEMES else default

def save_theme_preference(engine, email: str, name: str) -> bool:
    if name not in THEMES:
        raise ValueError(f"Unknown theme: {name}")
    if not (engine and email):
        return False
    config_store.save(engine, email.lower(), NAMESPACE, {"name": name}, saved_by=email, reason="settings")
    return True

def theme_css(name: Optional[str]) -> str:
    colors = get_theme(name)["colors"]
    css_vars = "\n".join(f"  {k}: {v};" for k, v in colors.items())
    return f"""
<style>
:root {{
{css_vars}
}}
.stApp {{ background: var(--surface); color: var(--text); }}
.stButton > button[kind="primary"] {{ background: var(--primary-blue); border-color: var(--primary-blue); }}
.workflow-badge {{
  padding: 4px 10px; border-radius: 12px; font-size: 10px; font-weight: 600;
  text-transform: uppercase; letter-spacing: .5px; display: inline-block; white-space: nowrap;
}}
</style>
"""

def apply_theme(name: Optional[str] = None) -> str:
    """Inject CSS for the session's theme (or `name`) and return the applied theme key."""
    name = name or st.session_state.get("theme_name") or DEFAULT_THEME
    if name not in THEMES:
        log.warning("Unknown theme %r, falling back to %s", name, DEFAULT_THEME)
        name = DEFAULT_THEME
    st.markdown(theme_css(name), unsafe_allow_html=True)
    st.session_state["theme_name"] = name
    return name

def status_badge_html(status: str) -> str:
    bg, fg = STATUS_BADGE_COLORS.get(status, ("#e5e7eb", "#374151"))
    return f'<span class="workflow-badge" style="background:{bg};color:{fg}">{status or "-"}</span>'
