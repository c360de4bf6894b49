import pytest

from core.policy import can_edit_page, can_view_page, load_page_access_rules, visible_pages_for
from core.rbac import get_user_id, grant_role, revoke_role, upsert_user, user_roles


def test_seeded_roles(engine):
    assert user_roles(engine, "admin@example.com") == {"superadmin"}
    assert user_roles(engine, "HOD.CSE@example.com") == {"hod"}
    assert user_roles(engine, "") == {"public"}
    assert user_roles(engine, "nobody@example.com") == set()


def test_upsert_and_grant(engine):
    uid = upsert_user("New.Person@example.com", "New Person", engine=engine)
    assert get_user_id(engine, "new.person@example.com") == uid
    grant_role("new.person@example.com", "hod", engine=engine)
    grant_role("new.person@example.com", "hod", engine=engine)
    assert user_roles(engine, "new.person@example.com") == {"hod"}


def test_unknown_user_raises(engine):
    with pytest.raises(ValueError):
        get_user_id(engine, "ghost@example.com")


def test_last_superadmin_cannot_be_revoked(engine):
    with pytest.raises(RuntimeError):
        revoke_role("admin@example.com", "superadmin", engine=engine)

    grant_role("coordinator.foet@example.com", "superadmin", engine=engine)
    revoke_role("admin@example.com", "superadmin", engine=engine)
    assert "superadmin" not in user_roles(engine, "admin@example.com")


def test_page_rules(engine):
    rules = load_page_access_rules(engine)
    assert can_view_page("Login", set(), rules=rules)
    assert can_view_page("Department Portal", {"hod"}, rules=rules)
    assert not can_view_page("Department Portal", {"research_coordinator"}, rules=rules)
    assert can_edit_page("Scholar Workflow", {"research_coordinator"}, rules=rules)
    assert not can_edit_page("Scholar Workflow", {"superadmin"}, rules=rules)
    assert not can_view_page("No Such Page", {"superadmin"}, rules=rules)


def test_visible_pages_per_role(engine):
    rules = load_page_access_rules(engine)
    assert visible_pages_for({"research_coordinator"}, rules=rules) == [
        "Examination Workflow", "Faculty Dashboard", "Login", "Logout",
        "Profile", "Scholar Workflow", "Settings",
    ]
    assert "Department Portal" in visible_pages_for({"hod"}, rules=rules)
    assert "Scholar Workflow" not in visible_pages_for({"hod"}, rules=rules)


def test_rules_without_table_fall_back_to_login(bare_engine):
    assert load_page_access_rules(bare_engine) == {"view_Login": {"public"}}
