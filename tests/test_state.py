import json
import pytest

from tunnelpage.common.state import save_session, load_session, session_path
from tunnelpage.state import TunnelSession


def test_session_roundtrip(tmp_path):
    s = TunnelSession(pid=99, log_path="/tmp/cf.log")
    assert save_session(s, tmp_path) is True
    data = json.loads(session_path(tmp_path).read_text(encoding="utf-8"))
    assert data["pid"] == 99
    assert data["url"] is None
    assert "saved_at" in data

    s.set_url("https://a.trycloudflare.com")
    save_session(s, tmp_path)
    assert load_session(tmp_path) == TunnelSession(pid=99, log_path="/tmp/cf.log", url="https://a.trycloudflare.com")

def test_url_is_set_once():
    s = TunnelSession(pid=1, log_path="x")
    s.set_url("https://a.trycloudflare.com")
    with pytest.raises(ValueError):
        s.set_url("https://b.trycloudflare.com")

def test_load_session_absent_or_corrupt(tmp_path):
    assert load_session(tmp_path) is None
    session_path(tmp_path).write_text("{no json", encoding="utf-8")
    assert load_session(tmp_path) is None
