from __future__ import annotations
import os
from pathlib import Path
from dataclasses import dataclass
from dotenv import load_dotenv

from tunnelpage.common.store import CredentialStore, resolve_value
from tunnelpage.errors import MissingConfig

def _getenv_bool(name: str, default: bool) -> bool:
    v = os.getenv(name, str(default)).strip().lower()
    return v in ("1", "true", "yes", "y", "on")

def _getenv_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw.replace(",", "."))
    except ValueError:
        print(f"[CONFIG] {name}={raw!r} no es numérico; usando {default}")
        return default

def _getenv_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        print(f"[CONFIG] {name}={raw!r} no es un entero; usando {default}")
        return default

def default_store_path() -> Path:
    raw = os.getenv("TUNNELPAGE_STORE", "").strip()
    if raw:
        return Path(raw).expanduser()
    return Path.home() / ".config" / "tunnelpage" / "credentials.env"

@dataclass(frozen=True)
class Settings:
    # túnel
    TUNNEL_BIN: str
    LOCAL_URL: str
    AUTO_INSTALL: bool

    # extracción de URL
    POLL_INTERVAL_SEC: float
    URL_TIMEOUT_SEC: float
    TAIL_LINES: int
    DIAG_TAIL_LINES: int

    # github
    GITHUB_API: str
    TARGET_PATH: str
    COMMIT_MESSAGE: str
    USER_AGENT: str
    HTTP_TIMEOUT_SEC: float

    # almacenamiento
    STORE_PATH: Path
    RUNTIME_DIR: Path

@dataclass(frozen=True)
class Credentials:
    owner: str
    repo: str
    token: str
    branch: str

    def __repr__(self) -> str:
        return f"Credentials(owner={self.owner!r}, repo={self.repo!r}, token='***', branch={self.branch!r})"

def load_settings() -> Settings:
    env_path = Path(__file__).resolve().parent.parent / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)
    else:
        load_dotenv()

    TUNNEL_BIN = os.getenv("TUNNEL_BIN", "cloudflared").strip() or "cloudflared"
    LOCAL_URL = os.getenv("LOCAL_URL", "http://localhost:8080").strip() or "http://localhost:8080"
    AUTO_INSTALL = _getenv_bool("AUTO_INSTALL", True)

    POLL_INTERVAL_SEC = _getenv_float("POLL_INTERVAL_SEC", 1.0)
    URL_TIMEOUT_SEC = _getenv_float("URL_TIMEOUT_SEC", 180.0)
    TAIL_LINES = _getenv_int("TAIL_LINES", 800)
    DIAG_TAIL_LINES = _getenv_int("DIAG_TAIL_LINES", 120)

    GITHUB_API = os.getenv("GITHUB_API", "https://api.github.com").strip().rstrip("/")
    TARGET_PATH = os.getenv("TARGET_PATH", "index.html").strip().lstrip("/") or "index.html"
    COMMIT_MESSAGE = os.getenv("COMMIT_MESSAGE", "Update tunnel redirect URL").strip()
    USER_AGENT = os.getenv("USER_AGENT", "tunnelpage-updater").strip()
    HTTP_TIMEOUT_SEC = _getenv_float("HTTP_TIMEOUT_SEC", 30.0)

    STORE_PATH = default_store_path()
    RUNTIME_DIR = Path(os.getenv("RUNTIME_DIR", "./runtime")).expanduser()

    return Settings(
        TUNNEL_BIN=TUNNEL_BIN,
        LOCAL_URL=LOCAL_URL,
        AUTO_INSTALL=AUTO_INSTALL,
        POLL_INTERVAL_SEC=POLL_INTERVAL_SEC,
        URL_TIMEOUT_SEC=URL_TIMEOUT_SEC,
        TAIL_LINES=TAIL_LINES,
        DIAG_TAIL_LINES=DIAG_TAIL_LINES,
        GITHUB_API=GITHUB_API,
        TARGET_PATH=TARGET_PATH,
        COMMIT_MESSAGE=COMMIT_MESSAGE,
        USER_AGENT=USER_AGENT,
        HTTP_TIMEOUT_SEC=HTTP_TIMEOUT_SEC,
        STORE_PATH=STORE_PATH,
        RUNTIME_DIR=RUNTIME_DIR,
    )

def resolve_credentials(store: CredentialStore, prompt=None, secret_prompt=None) -> Credentials:
    """
    Obtiene owner/repo/token/branch del almacén del usuario.
    Pregunta (y guarda) lo que falte; branch usa 'main' sin preguntar.
    Lanza MissingConfig si owner, repo o token quedan vacíos.
    """
    kw = {"prompt": prompt, "secret_prompt": secret_prompt}

    owner = resolve_value(store, "GH_OWNER", "Propietario del repositorio (usuario u organización): ", **kw)
    repo = resolve_value(store, "GH_REPO", "Nombre del repositorio: ", **kw)
    token = resolve_value(store, "GH_TOKEN", "Token de acceso de GitHub: ", sensitive=True, **kw)
    branch = resolve_value(store, "GH_BRANCH", "", default="main", **kw)

    missing = [k for k, v in (("GH_OWNER", owner), ("GH_REPO", repo), ("GH_TOKEN", token)) if not v]
    if missing:
        raise MissingConfig(f"Falta configuración obligatoria: {', '.join(missing)} (almacén: {store.path})")

    return Credentials(owner=owner, repo=repo, token=token, branch=branch)
