# core/policy.py
from __future__ import annotations
import functools
import logging
from typing import Any, Callable, Dict, Optional, Set
import streamlit as st
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import text as sa_text

from core.rbac import user_roles as _db_user_roles, _ensure_engine

log = logging.getLogger(__name__)

# ============================================================================
# PAGE ACCESS (rules live in page_access_rules)
# ============================================================================

def load_page_access_rules(engine: Engine) -> Dict[str, Set[str]]:
    """
    Returns a lookup like
    {'view_Scholar Workflow': {'superadmin', 'research_coordinator'}, ...}
    """
    lookup: Dict[str, Set[str]] = {}
    try:
        with engine.begin() as conn:
            rules = conn.execute(sa_text(
                "SELECT page_name, permission_type, role_name FROM page_access_rules"
            )).fetchall()
    except SQLAlchemyError:
        # table missing before the first schema run: only the login page is reachable
        log.exception("Could not load page access rules")
        return {"view_Login": {"public"}}

    for page, perm_type, role in rules:
        lookup.setdefault(f"{perm_type}_{page}", set()).add(role)
    return lookup

@st.cache_data(ttl=300)  # rules change rarely
def _cached_rules(_engine: Engine) -> Dict[str, Set[str]]:
    return load_page_access_rules(_engine)

def _rules(engine: Optional[Engine]) -> Dict[str, Set[str]]:
    return _cached_rules(_ensure_engine(engine))

def current_user() -> Dict[str, Any]:
    return st.session_state.get("user") or {}

def user_roles(engine: Optional[Engine] = None, email: Optional[str] = None) -> Set[str]:
    """Roles of `email`, or of the signed-in user when no email is given."""
    if not email:
        email = current_user().get("email")
    if not email:
        return {"public"}
    return _db_user_roles(_ensure_engine(engine), email)

def can_view_page(page_name: str, roles: Set[str], engine: Optional[Engine] = None, rules: Optional[Dict[str, Set[str]]] = None) -> bool:
    rules = rules if rules is not None else _rules(engine)
    allowed_roles = rules.get(f"view_{page_name}", set())
    if "public" in allowed_roles:
        return True
    return bool(roles & allowed_roles)

def can_edit_page(page_name: str, roles: Set[str], engine: Optional[Engine] = None, rules: Optional[Dict[str, Set[str]]] = None) -> bool:
    rules = rules if rules is not None else _rules(engine)
    return bool(roles & rules.get(f"edit_{page_name}", set()))

def visible_pages_for(roles: Set[str], engine: Optional[Engine] = None, rules: Optional[Dict[str, Set[str]]] = None) -> list[str]:
    rules = rules if rules is not None else _rules(engine)
    all_pages = {key.split("_", 1)[1] for key in rules}
    return sorted(p for p in all_pages if can_view_page(p, roles, rules=rules))

def require_page(page_name: str):
    def _wrap(fn: Callable):
        @functools.wraps(fn)
        def _inner(*args, **kwargs):
            roles = user_roles()
            if not can_view_page(page_name, roles):
                st.error("Access Denied. You don't have permission to view this page.")
                st.stop()
            return fn(*args, **kwargs)
        return _inner
    return _wrap
