from core.activity_log import activity_history
from core.auth import authenticate, hash_password, verify_password
from core.department_mapping import ENGINEERING
from core.profile_service import actor_scope, fetch_actor_profile, update_actor_profile

PASSWORD = "Portal@1234"


def test_hash_and_verify():
    hashed = hash_password("s3cret", rounds=4)
    assert hashed.startswith("$2")
    assert verify_password("s3cret", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("s3cret", "not-a-bcrypt-hash")
    assert not verify_password("", hashed)


def test_authenticate_coordinator(engine):
    user = authenticate(engine, "  Coordinator.FOET@example.com ", PASSWORD)
    assert user["email"] == "coordinator.foet@example.com"
    assert user["role"] == "research_coordinator"
    assert user["roles"] == {"research_coordinator"}
    assert user["assigned_faculty"] == ENGINEERING
    assert activity_history(engine, user["email"])[0]["action"] == "signed_in"


def test_authenticate_rejects_bad_credentials(engine):
    assert authenticate(engine, "admin@example.com", "nope") is None
    assert authenticate(engine, "ghost@example.com", PASSWORD) is None
    assert authenticate(engine, "", PASSWORD) is None


def test_fetch_profile_adds_department_code(engine):
    profile = fetch_actor_profile(engine, "hod.cse@example.com")
    assert profile["department_code"] == "CSE"
    assert actor_scope(profile) == "Computer Science and Engineering"
    assert fetch_actor_profile(engine, "ghost@example.com") is None
    assert fetch_actor_profile(engine, None) is None


def test_actor_scope_by_role():
    assert actor_scope({"role": "research_coordinator", "assigned_faculty": ENGINEERING}) == ENGINEERING
    assert actor_scope({"role": "hod", "assigned_department": "Civil Engineering"}) == "Civil Engineering"
    assert actor_scope({"role": "superadmin", "assigned_faculty": ENGINEERING}) == ""
    assert actor_scope({"role": "hod"}) == ""
    assert actor_scope(None) == ""


def test_update_profile(engine):
    email = "hod.mech@example.com"
    ok, msg = update_actor_profile(engine, email, {"name": "  Dr. C. Chandru ", "phone_no": "9876543210"})
    assert ok, msg
    profile = fetch_actor_profile(engine, email)
    assert profile["name"] == "Dr. C. Chandru"
    assert profile["phone_no"] == "9876543210"
    assert activity_history(engine, email)[0]["action"] == "profile_updated"


def test_update_profile_validation(engine):
    email = "hod.mech@example.com"
    assert update_actor_profile(engine, email, {"role": "superadmin"})[0] is False
    assert update_actor_profile(engine, email, {"name": "   "}) == (False, "Name cannot be empty")
    assert update_actor_profile(engine, email, {}) == (False, "Nothing to update")
    assert update_actor_profile(engine, "ghost@example.com", {"name": "Ghost"}) == (False, "User not found")
