import logging
from datetime import timedelta

from docchat.core.session_store import DocumentRecord, DocumentSessionStore


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def _store():
    clock = FakeClock()
    return DocumentSessionStore(timedelta(minutes=20), clock=clock), clock


def _record(name="a.pdf"):
    return DocumentRecord(file_name=name, chunks=["text"], summary="s")


def test_put_and_get():
    store, _ = _store()
    store.put("s1", _record())
    assert store.get("s1").file_name == "a.pdf"
    assert store.get("other") is None
    assert store.get(None) is None


def test_one_record_per_session():
    store, _ = _store()
    store.put("s1", _record("a.pdf"))
    store.put("s1", _record("b.docx"))
    assert store.get("s1").file_name == "b.docx"
    assert len(store) == 1


def test_idle_expiry_and_sliding_refresh():
    store, clock = _store()
    store.put("s1", _record())
    clock.now += 19 * 60
    assert store.get("s1") is not None  # refreshes the deadline
    clock.now += 19 * 60
    assert store.get("s1") is not None
    clock.now += 20 * 60
    assert store.get("s1") is None
    assert len(store) == 0


def test_clear():
    store, _ = _store()
    store.put("s1", _record())
    assert store.clear("s1") is True
    assert store.clear("s1") is False
    assert store.get("s1") is None


def test_purge_expired_runs_on_put():
    store, clock = _store()
    store.put("old", _record())
    clock.now += 21 * 60
    store.put("new", _record())
    assert len(store) == 1
    assert store.purge_expired() == 0


def test_full_content_joins_chunks():
    record = DocumentRecord(file_name="f.pdf", chunks=["a", "b"])
    assert record.full_content() == "a\n\nb"
    assert record.summary == ""


def test_expiry_log_does_not_leak_session_id(caplog):
    store, clock = _store()
    store.put("secret-cookie-value", _record("report.pdf"))
    clock.now += 21 * 60
    with caplog.at_level(logging.INFO, logger="docchat.core.session_store"):
        assert store.get("secret-cookie-value") is None
    assert "report.pdf" in caplog.text
    assert "secret-cookie-value" not in caplog.text
