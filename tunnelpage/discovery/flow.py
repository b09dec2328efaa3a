# sondeo del log hasta encontrar la URL (WAITING → FOUND | TIMED_OUT)

from __future__ import annotations
import sys
import time
from collections import deque
from typing import Callable, Optional

from .log_url import find_tunnel_url

def read_tail(path: str, max_lines: int = 800) -> Optional[list[str]]:
    """
    Últimas `max_lines` líneas del fichero, o None si no se puede leer
    (el túnel puede no haberlo creado/escrito todavía).
    """
    try:
        with open(path, "r", encoding="utf-8", errors="ignore") as f:
            return list(deque(f, maxlen=max(0, int(max_lines))))
    except OSError:
        return None

def wait_for_tunnel_url(log_path: str,
                        timeout_sec: float = 180.0,
                        interval_sec: float = 1.0,
                        tail_lines: int = 800,
                        clock: Callable[[], float] = time.monotonic,
                        sleep: Callable[[float], None] = time.sleep) -> Optional[str]:
    """
    Relee la cola del log cada `interval_sec` hasta encontrar una URL del
    túnel. Devuelve la URL, o None solo cuando ha pasado `timeout_sec` entero.
    """
    deadline = clock() + max(0.0, timeout_sec)
    ticks = 0
    while True:
        ticks += 1
        lines = read_tail(log_path, tail_lines)
        if lines:
            url = find_tunnel_url("".join(lines))
            if url:
                print(f"[DISCOVER] URL encontrada tras {ticks} lectura(s): {url}")
                return url

        remaining = deadline - clock()
        if remaining <= 0:
            print(f"[DISCOVER] Sin URL tras {timeout_sec:.0f}s ({ticks} lecturas de {log_path})", file=sys.stderr)
            return None
        sleep(min(interval_sec, remaining))
