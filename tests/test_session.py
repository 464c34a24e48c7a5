# tests/test_session.py
import json

from turbo_dashboard.session import ActivityObserver


def _stored(session_manager) -> dict:
    return json.loads(session_manager.path.read_text())


def test_no_marker_means_no_session(session_manager):
    assert session_manager.check_session() is False


def test_fresh_session_is_valid(session_manager, notifier):
    session_manager.save_session("alice")

    assert session_manager.check_session() is True
    assert session_manager.username == "alice"
    assert notifier.messages("warning") == []


def test_session_near_expiry_warns_but_stays_valid(session_manager, notifier, clock):
    session_manager.save_session("alice")
    clock.advance(23.5)

    assert session_manager.check_session() is True
    assert notifier.messages("warning") == ["Session expires in 1 hour(s)"]


def test_expired_session_is_cleared(session_manager, clock):
    session_manager.save_session("alice")
    clock.advance(25)

    assert session_manager.check_session() is False
    assert not session_manager.path.exists()


def test_malformed_marker_is_discarded(session_manager):
    session_manager.path.write_text("{not json")

    assert session_manager.check_session() is False
    assert not session_manager.path.exists()


def test_marker_without_timestamp_is_discarded(session_manager):
    session_manager.path.write_text(json.dumps({"username": "alice"}))

    assert session_manager.check_session() is False
    assert not session_manager.path.exists()


def test_refresh_slides_the_window(session_manager, clock):
    session_manager.save_session("alice")
    clock.advance(20)
    session_manager.refresh_session()
    clock.advance(20)

    assert session_manager.check_session() is True
    assert _stored(session_manager)["username"] == "alice"


def test_refresh_without_marker_does_nothing(session_manager):
    session_manager.refresh_session()

    assert not session_manager.path.exists()


def test_clear_session(session_manager):
    session_manager.save_session("alice")
    session_manager.clear_session()
    session_manager.clear_session()

    assert session_manager.check_session() is False


def test_activity_observer_only_refreshes_while_attached(session_manager, clock):
    session_manager.save_session("alice")
    saved_at = _stored(session_manager)["timestamp"]
    observer = ActivityObserver(session_manager)
    clock.advance(1)

    assert observer.notify("key") is False
    assert _stored(session_manager)["timestamp"] == saved_at

    observer.attach()
    assert observer.notify("resize") is False
    assert observer.notify("scroll") is True
    assert _stored(session_manager)["timestamp"] > saved_at

    observer.detach()
    assert observer.notify("pointer") is False


def test_marker_with_infinite_timestamp_is_discarded(session_manager):
    session_manager.path.write_text('{"timestamp": Infinity, "username": "alice"}')

    assert session_manager.check_session() is False
    assert not session_manager.path.exists()


def test_marker_from_the_future_is_discarded(session_manager, clock):
    session_manager.save_session("alice")
    clock.advance(-48)

    assert session_manager.check_session() is False
    assert not session_manager.path.exists()
