from __future__ import annotations

import sys

from tunnelpage.config import load_settings, resolve_credentials
from tunnelpage.common.store import CredentialStore
from tunnelpage.common.state import save_session, load_session
from tunnelpage.discovery.flow import wait_for_tunnel_url, read_tail
from tunnelpage.errors import TunnelPageError, ExtractionTimeout
from tunnelpage.github.client import fetch_file, push_file
from tunnelpage.page.patch import patch_redirect
from tunnelpage.tunnel.launcher import ensure_binary, start_tunnel


def run_update(settings, prompt=None, secret_prompt=None) -> str:
    """
    config → launch → extract → patch. Devuelve la URL publicada.
    Cualquier fallo sale como TunnelPageError; el túnel nunca se detiene.
    """
    print("▶ Actualizando página de redirección del túnel.")

    # 1) Configuración
    store = CredentialStore(settings.STORE_PATH)
    creds = resolve_credentials(store, prompt=prompt, secret_prompt=secret_prompt)
    print(f"[CONFIG] {creds.owner}/{creds.repo}@{creds.branch} -> {settings.TARGET_PATH}")

    previous = load_session(settings.RUNTIME_DIR)
    if previous is not None:
        print(f"[STATE] Sesión anterior: PID {previous.pid} ({previous.url or 'sin URL'}); no se detiene.")

    # 2) Lanzar túnel
    binary = ensure_binary(settings.TUNNEL_BIN, auto_install=settings.AUTO_INSTALL)
    session = start_tunnel(binary, settings.LOCAL_URL)
    print(f"✅ Túnel lanzado (PID {session.pid}). Para pararlo, termina ese proceso.")
    save_session(session, settings.RUNTIME_DIR)

    # 3) Esperar URL
    print(f"Esperando URL pública (hasta {settings.URL_TIMEOUT_SEC:.0f}s)…")
    url = wait_for_tunnel_url(
        session.log_path,
        timeout_sec=settings.URL_TIMEOUT_SEC,
        interval_sec=settings.POLL_INTERVAL_SEC,
        tail_lines=settings.TAIL_LINES,
    )
    if not url:
        tail = read_tail(session.log_path, settings.DIAG_TAIL_LINES) or []
        raise ExtractionTimeout(
            f"No apareció ninguna URL del túnel en {session.log_path} tras {settings.URL_TIMEOUT_SEC:.0f}s",
            log_tail=tail,
        )
    session.set_url(url)
    save_session(session, settings.RUNTIME_DIR)
    print(f"[OK] URL pública: {url}")

    # 4) Leer → parchear → escribir
    remote = fetch_file(
        settings.GITHUB_API, creds.owner, creds.repo, settings.TARGET_PATH, creds.branch, creds.token,
        user_agent=settings.USER_AGENT, timeout=settings.HTTP_TIMEOUT_SEC,
    )
    new_text, strategy = patch_redirect(remote.text, url)
    print(f"[PATCH] estrategia={strategy}")

    if new_text == remote.text:
        print(f"✅ {settings.TARGET_PATH} ya apunta a {url}; no hay nada que subir.")
        return url

    commit_url = push_file(
        settings.GITHUB_API, creds.owner, creds.repo, creds.branch, creds.token,
        remote, new_text, settings.COMMIT_MESSAGE,
        user_agent=settings.USER_AGENT, timeout=settings.HTTP_TIMEOUT_SEC,
    )
    print(f"✅ {settings.TARGET_PATH} actualizado -> {url}")
    if commit_url:
        print(f"[GH] Commit: {commit_url}")
    return url


def main() -> int:
    try:
        settings = load_settings()
        run_update(settings)
    except ExtractionTimeout as e:
        print(f"❌ {e}", file=sys.stderr)
        if e.log_tail:
            print("----- últimas líneas del log -----", file=sys.stderr)
            print("".join(e.log_tail).rstrip("\n"), file=sys.stderr)
        return 1
    except TunnelPageError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n⏹ Cancelado.", file=sys.stderr)
        return 1
    return 0
