from __future__ import annotations
import os
import json
import time
from pathlib import Path
from dataclasses import asdict

from tunnelpage.state import TunnelSession

def _runtime_dir(raw: str | os.PathLike | None = None) -> Path:
    if raw is None:
        raw = os.getenv("RUNTIME_DIR", "./runtime")
    p = Path(raw).expanduser().resolve()
    p.mkdir(parents=True, exist_ok=True)
    return p

def session_path(runtime_dir=None) -> Path:
    return _runtime_dir(runtime_dir) / "tunnel_session.json"

def _atomic_write_json(path: Path, payload) -> None:
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, path)
    except OSError:
        if tmp.exists():
            tmp.unlink(missing_ok=True)
        raise

def save_session(session: TunnelSession, runtime_dir=None) -> bool:
    """
    Guarda la última sesión lanzada para poder localizar el PID después
    (el script no detiene el túnel). Un fallo aquí no aborta la ejecución.
    """
    payload = asdict(session)
    payload["saved_at"] = time.time()
    try:
        path = session_path(runtime_dir)
        _atomic_write_json(path, payload)
        print(f"[STATE] sesión guardada -> {path}")
        return True
    except OSError as e:
        print(f"[STATE] ERROR save_session: {e}")
        return False

def load_session(runtime_dir=None) -> TunnelSession | None:
    path = session_path(runtime_dir)
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return TunnelSession(pid=int(data["pid"]), log_path=str(data["log_path"]), url=data.get("url"))
    except (OSError, ValueError, KeyError, TypeError) as e:
        print(f"[STATE] ERROR load_session: {e}")
        return None
