import pytest

from tunnelpage.common.store import CredentialStore, resolve_value
from tunnelpage.config import load_settings, resolve_credentials
from tunnelpage.errors import MissingConfig

KEYS = ("GH_OWNER", "GH_REPO", "GH_TOKEN", "GH_BRANCH")


@pytest.fixture
def store(tmp_path, monkeypatch):
    for k in KEYS:
        monkeypatch.delenv(k, raising=False)
    return CredentialStore(tmp_path / "cfg" / "credentials.env")


def _no_prompt(text):
    raise AssertionError(f"no debería preguntar: {text}")


def test_prompts_and_persists(store):
    answers = iter(["octo", "site"])
    secrets = []

    def secret(text):
        secrets.append(text)
        return "s3cret"

    creds = resolve_credentials(store, prompt=lambda t: next(answers), secret_prompt=secret)

    assert (creds.owner, creds.repo, creds.token, creds.branch) == ("octo", "site", "s3cret", "main")
    assert len(secrets) == 1
    assert store.get("GH_OWNER") == "octo"
    assert store.get("GH_TOKEN") == "s3cret"
    assert store.get("GH_BRANCH") == "main"
    assert "s3cret" not in repr(creds)

def test_second_run_reads_store(store):
    store.set("GH_OWNER", "octo")
    store.set("GH_REPO", "site")
    store.set("GH_TOKEN", "tok")
    store.set("GH_BRANCH", "gh-pages")
    creds = resolve_credentials(store, prompt=_no_prompt, secret_prompt=_no_prompt)
    assert creds.branch == "gh-pages"
    assert creds.token == "tok"

def test_environment_takes_precedence(store, monkeypatch):
    store.set("GH_OWNER", "from-file")
    monkeypatch.setenv("GH_OWNER", "from-env")
    assert store.get("GH_OWNER") == "from-env"

def test_empty_answer_is_missing_config(store):
    with pytest.raises(MissingConfig, match="GH_TOKEN"):
        resolve_credentials(store, prompt=lambda t: "x", secret_prompt=lambda t: "   ")
    assert store.get("GH_TOKEN") == ""

def test_resolve_value_default_is_persisted(store):
    assert resolve_value(store, "GH_BRANCH", "", default="main", prompt=_no_prompt) == "main"
    assert store.get("GH_BRANCH") == "main"

def test_load_settings_defaults(monkeypatch, tmp_path):
    for k in ("TUNNEL_BIN", "LOCAL_URL", "POLL_INTERVAL_SEC", "URL_TIMEOUT_SEC", "TAIL_LINES",
              "DIAG_TAIL_LINES", "TARGET_PATH", "GITHUB_API"):
        monkeypatch.delenv(k, raising=False)
    monkeypatch.setenv("TUNNELPAGE_STORE", str(tmp_path / "c.env"))
    s = load_settings()
    assert s.TUNNEL_BIN == "cloudflared"
    assert s.LOCAL_URL == "http://localhost:8080"
    assert s.POLL_INTERVAL_SEC == 1.0
    assert s.URL_TIMEOUT_SEC == 180.0
    assert s.TAIL_LINES == 800
    assert s.DIAG_TAIL_LINES == 120
    assert s.TARGET_PATH == "index.html"
    assert s.GITHUB_API == "https://api.github.com"
    assert s.STORE_PATH == tmp_path / "c.env"

def test_load_settings_bad_number_falls_back(monkeypatch):
    monkeypatch.setenv("URL_TIMEOUT_SEC", "mucho")
    assert load_settings().URL_TIMEOUT_SEC == 180.0

def test_load_settings_bad_integer_falls_back(monkeypatch):
    monkeypatch.setenv("TAIL_LINES", "muchas")
    monkeypatch.setenv("DIAG_TAIL_LINES", "12.5")
    s = load_settings()
    assert s.TAIL_LINES == 800
    assert s.DIAG_TAIL_LINES == 120
