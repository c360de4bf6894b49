from core.activity_log import activity_history, log_activity


def test_history_newest_first_with_details(engine):
    assert log_activity(engine, "Someone@Example.com", "first")
    assert log_activity(engine, "someone@example.com", "second", {"scholar_id": 7})
    history = activity_history(engine, "someone@example.com")
    assert [h["action"] for h in history] == ["second", "first"]
    assert history[0]["details"] == {"scholar_id": 7}
    assert history[1]["details"] == {}


def test_history_limit_and_isolation(engine):
    for n in range(5):
        log_activity(engine, "a@example.com", f"a{n}")
    log_activity(engine, "b@example.com", "b0")
    assert len(activity_history(engine, "a@example.com", limit=3)) == 3
    assert [h["action"] for h in activity_history(engine, "b@example.com")] == ["b0"]


def test_logging_inside_caller_transaction(engine):
    with engine.begin() as conn:
        assert log_activity(conn, "c@example.com", "in_tx")
    assert activity_history(engine, "c@example.com")[0]["action"] == "in_tx"


def test_missing_table_reports_failure(bare_engine):
    assert log_activity(bare_engine, "x@example.com", "lost") is False
