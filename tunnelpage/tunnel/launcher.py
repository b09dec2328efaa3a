# localizar/instalar cloudflared y lanzarlo desacoplado

from __future__ import annotations
import os
import sys
import shutil
import tempfile
import subprocess
from typing import Optional

from tunnelpage.errors import BinaryUnavailable, LaunchFailure
from tunnelpage.state import TunnelSession

# instalación desatendida por plataforma
INSTALL_COMMANDS = {
    "win32": ["winget", "install", "--id", "Cloudflare.cloudflared", "-e", "--silent",
              "--accept-source-agreements", "--accept-package-agreements"],
    "darwin": ["brew", "install", "cloudflared"],
}

def locate_binary(name: str) -> Optional[str]:
    return shutil.which(name)

def install_binary(platform: str | None = None) -> bool:
    cmd = INSTALL_COMMANDS.get(platform or sys.platform)
    if not cmd:
        print(f"[TUNNEL] Sin instalador automático para {platform or sys.platform}", file=sys.stderr)
        return False
    if not shutil.which(cmd[0]):
        print(f"[TUNNEL] Gestor de paquetes no disponible: {cmd[0]}", file=sys.stderr)
        return False

    print(f"[TUNNEL] Instalando: {' '.join(cmd)}")
    try:
        r = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True, timeout=600)
    except (OSError, subprocess.TimeoutExpired) as e:
        print(f"[TUNNEL] Instalación fallida: {e}", file=sys.stderr)
        return False
    if r.returncode != 0:
        print(f"[TUNNEL] Instalación fallida (código {r.returncode}):\n{r.stdout}", file=sys.stderr)
        return False
    return True

def ensure_binary(name: str, auto_install: bool = True) -> str:
    """Ruta al ejecutable; intenta una instalación si no está en PATH."""
    path = locate_binary(name)
    if path:
        return path

    print(f"[TUNNEL] '{name}' no está en PATH.")
    if auto_install and install_binary():
        path = locate_binary(name)
        if path:
            print(f"[TUNNEL] Instalado en {path}")
            return path

    raise BinaryUnavailable(f"No se encontró el ejecutable '{name}' (instálalo y vuelve a ejecutar)")

def _detach_kwargs() -> dict:
    if os.name == "nt":
        flags = (getattr(subprocess, "DETACHED_PROCESS", 0x00000008)
                 | getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", 0x00000200)
                 | getattr(subprocess, "CREATE_NO_WINDOW", 0x08000000))
        return {"creationflags": flags}
    return {"start_new_session": True}

def build_command(binary: str, local_url: str, log_path: str) -> list[str]:
    return [binary, "tunnel", "--url", local_url, "--loglevel", "info", "--logfile", log_path]

def start_tunnel(binary: str, local_url: str = "http://localhost:8080") -> TunnelSession:
    """
    Lanza el túnel en segundo plano (sin ventana, sin esperar) con el log
    en un temporal nuevo. El proceso sobrevive al script.
    """
    try:
        fd, log_path = tempfile.mkstemp(prefix="cloudflared-", suffix=".log")
        os.close(fd)
    except OSError as e:
        raise LaunchFailure(f"No se pudo crear el fichero de log: {e}") from e

    cmd = build_command(binary, local_url, log_path)
    try:
        proc = subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            close_fds=True,
            **_detach_kwargs(),
        )
    except OSError as e:
        raise LaunchFailure(f"No se pudo lanzar {binary}: {e}") from e

    print(f"[TUNNEL] PID {proc.pid}  log={log_path}")
    return TunnelSession(pid=proc.pid, log_path=log_path)
