# app.py
from __future__ import annotations
import logging
import os
from pathlib import Path
import streamlit as st

from core.settings import load_settings
from core.db import get_engine, init_db
from core.rbac import user_roles as fetch_roles_for
from core.policy import can_view_page
from core.navigation import current_route, navigate_to_logout
from core.theme import apply_theme
from core.ui import hide_sidebar, render_footer
from screens import login as login_screen
from screens import logout as logout_screen

log = logging.getLogger(__name__)

APP_FILE = Path(__file__).resolve()
APP_DIR  = APP_FILE.parent
SCREENS_DIR = APP_DIR / "screens"

# (page rule name, screen stem, nav title)
NAV_PAGES = [
    ("Profile", "profile", "👤 Profile"),
    ("Faculty Dashboard", "dashboard", "📊 Faculty Dashboard"),
    ("Scholar Workflow", "workflow", "🗂️ Workflow"),
    ("Department Portal", "department", "🏛️ Department Portal"),
    ("Settings", "settings", "⚙️ Settings"),
]

def _settings():
    if "settings" not in st.session_state:
        st.session_state["settings"] = load_settings()
    return st.session_state["settings"]

def _ensure_engine():
    if "engine" not in st.session_state:
        st.session_state["engine"] = get_engine(_settings().db.url)
    return st.session_state["engine"]

def _configure_logging(level: str):
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=getattr(logging, level.upper(), logging.INFO),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

def _session_user():
    u = st.session_state.get("user") or {}
    email = (u.get("email") or "").strip().lower()
    if email and not u.get("roles"):
        u["roles"] = fetch_roles_for(_ensure_engine(), email)
        st.session_state["user"] = u
    return u, email, u.get("roles", set())

def _screen_path(stem: str) -> Path | None:
    """screens/<stem>.py, else screens/<stem>/main.py."""
    for candidate in (SCREENS_DIR / f"{stem}.py", SCREENS_DIR / stem / "main.py"):
        if candidate.exists():
            return candidate
    return None

def _build_pages(roles: set[str], engine):
    pages, missing = [], []
    for policy_name, stem, title in NAV_PAGES:
        if not can_view_page(policy_name, roles, engine=engine):
            continue
        page_path = _screen_path(stem)
        if page_path is None:
            missing.append(stem)
            continue
        relative = str(page_path.relative_to(APP_DIR)).replace(os.path.sep, "/")
        pages.append(st.Page(relative, title=title, default=(stem == "profile"), url_path=stem))
    if missing:
        log.warning("Screens not found: %s", missing)
        st.sidebar.warning(f"Missing pages: {missing}")
    return pages

def main():
    settings = _settings()
    _configure_logging(settings.app.log_level)
    st.set_page_config(page_title=settings.app.name, layout="wide", initial_sidebar_state="auto", page_icon="🎓")

    engine = _ensure_engine()

    # schema + seed once per session
    if "db_initialized" not in st.session_state:
        try:
            init_db(engine)
        except Exception as e:
            log.exception("Database initialisation failed")
            st.error("Database schema initialization failed. See details below.")
            with st.expander("Diagnostics"):
                st.exception(e)
            st.stop()
        st.session_state["db_initialized"] = True

    apply_theme(st.session_state.get("theme_name") or settings.portal.default_theme)

    route = current_route()
    if route == "logout":
        logout_screen.render()
        render_footer(settings.app.name)
        return
    if route == "login":
        login_screen.render(engine, settings)
        render_footer(settings.app.name)
        return

    # --- AUTHENTICATED APP FLOW ---
    user, email, roles = _session_user()
    display_name = (user.get("full_name") or email).strip() or "User"
    roles_str = ", ".join(r for r in sorted(roles) if r != "public")

    left, right = st.columns([0.75, 0.25])
    with left: st.caption(f"Signed in as **{display_name}** · _{roles_str}_")
    with right:
        if st.button("Logout", key="logout_top"):
            navigate_to_logout()

    pages = _build_pages(roles, engine)
    if not pages:
        hide_sidebar()
        st.error("No pages available for your current roles.")
    else:
        st.navigation(pages, position="sidebar").run()

    render_footer(settings.app.name)

if __name__ == "__main__":
    main()
