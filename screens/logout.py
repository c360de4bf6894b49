# screens/logout.py
from __future__ import annotations
import streamlit as st

from core.auth import sign_out
from core.navigation import navigate_to_login
from core.ui import hide_sidebar

def render():
    hide_sidebar()
    st.title("🚪 Logout")

    # sign_out drops the per-table view states along with the user
    email = sign_out()
    if email:
        st.success(f"Successfully logged out {email}")
    else:
        st.info("You are already logged out")

    st.markdown("---")
    if st.button("🔄 Return to Login", type="primary"):
        navigate_to_login()
