# sesión del túnel (pid/log/url)

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

@dataclass
class TunnelSession:
    """
    Estado de la sesión lanzada:
    - pid: proceso cloudflared (queda vivo al terminar el script)
    - log_path: fichero temporal donde escribe sus logs
    - url: URL pública, se rellena una sola vez al descubrirla
    """
    pid: int
    log_path: str
    url: Optional[str] = None

    def set_url(self, url: str) -> None:
        if self.url is not None:
            raise ValueError(f"La sesión ya tiene URL: {self.url}")
        self.url = url

@dataclass(frozen=True)
class RemoteFile:
    path: str
    sha: str
    text: str
