from __future__ import annotations
import sys
import base64
from urllib.parse import quote

import requests

from tunnelpage.errors import RemoteFetchFailure, RemotePushFailure
from tunnelpage.state import RemoteFile


def contents_url(api: str, owner: str, repo: str, path: str) -> str:
    return f"{api.rstrip('/')}/repos/{quote(owner)}/{quote(repo)}/contents/{quote(path.lstrip('/'))}"

def _headers(token: str, user_agent: str) -> dict:
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/vnd.github+json",
        "User-Agent": user_agent,
    }

def fetch_file(api: str, owner: str, repo: str, path: str, branch: str, token: str,
               user_agent: str = "tunnelpage-updater", timeout: float = 30) -> RemoteFile:
    """
    GET /repos/{owner}/{repo}/contents/{path}?ref={branch}
    Devuelve el texto (UTF-8) y el sha actual del fichero.
    """
    url = contents_url(api, owner, repo, path)
    try:
        r = requests.get(url, headers=_headers(token, user_agent), params={"ref": branch}, timeout=timeout)
    except requests.RequestException as e:
        raise RemoteFetchFailure(f"Error de red leyendo {path}: {e}") from e

    if not r.ok:
        msg = f"GET {path} fallo {r.status_code}: {r.text}"
        if r.status_code == 401:
            msg += "  (Token inválido)"
        elif r.status_code == 404:
            msg += f"  (No existe {owner}/{repo}:{path} en la rama '{branch}' o el token no tiene acceso)"
        raise RemoteFetchFailure(msg)

    try:
        data = r.json()
        sha = data["sha"]
        encoding = data.get("encoding")
        if encoding != "base64":
            # ficheros > 1 MB llegan con content="" y encoding="none"
            raise RemoteFetchFailure(
                f"{path} no viene en base64 (encoding={encoding!r}, size={data.get('size')}); "
                "no se sobrescribe un fichero que no se ha podido leer"
            )
        text =base64.b64decode(data.get("content") or "").decode("utf-8")
    except (ValueError, KeyError, TypeError) as e:
        raise RemoteFetchFailure(f"Respuesta inesperada para {path}: {e}: {r.text}") from e

    print(f"[GH] {owner}/{repo}:{path}@{branch} sha={sha} ({len(text)} chars)")
    return RemoteFile(path=path, sha=sha, text=text)

def push_file(api: str, owner: str, repo: str, branch: str, token: str,
              remote: RemoteFile, new_text: str, message: str,
              user_agent: str = "tunnelpage-updater", timeout: float = 30) -> str | None:
    """
    PUT con el sha leído antes: GitHub rechaza la escritura si el fichero
    cambió entretanto. Un solo intento. Devuelve commit.html_url si viene.
    """
    url = contents_url(api, owner, repo, remote.path)
    body = {
        "message": message,
        "content": base64.b64encode(new_text.encode("utf-8")).decode("ascii"),
        "sha": remote.sha,
        "branch": branch,
    }
    try:
        r = requests.put(url, headers=_headers(token, user_agent), json=body, timeout=timeout)
    except requests.RequestException as e:
        raise RemotePushFailure(f"Error de red escribiendo {remote.path}: {e}") from e

    if not r.ok:
        msg = f"PUT {remote.path} fallo {r.status_code}: {r.text}"
        if r.status_code in (409, 422):
            msg += f"  (sha {remote.sha} obsoleto: el fichero cambió en remoto)"
        elif r.status_code in (401, 403):
            msg += "  (Token sin permiso de escritura)"
        raise RemotePushFailure(msg)

    try:
        commit_url = (r.json().get("commit") or {}).get("html_url")
    except (ValueError, AttributeError):
        print(f"[GH] Respuesta sin JSON tras PUT {r.status_code}", file=sys.stderr)
        commit_url = None
    return commit_url
