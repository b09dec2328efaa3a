# búsqueda de la URL pública en el texto del log

from __future__ import annotations
import re
from typing import Optional

TUNNEL_DOMAINS = ("trycloudflare.com", "cfargotunnel.com")

_URL_TAIL = r"[^\s\"'<>|\\]*"

# hosts propios del proveedor, p.ej. "failed to request quick Tunnel: Post https://api.trycloudflare.com/tunnel"
PROVIDER_HOSTS = ("api", "www")
_NOT_PROVIDER = r"(?!(?:" + "|".join(PROVIDER_HOSTS) + r")\.)"

def _bare(domain: str) -> re.Pattern:
    return re.compile(r"https://" + _NOT_PROVIDER + r"[A-Za-z0-9-]+\." + re.escape(domain) + _URL_TAIL, re.IGNORECASE)

def _json_field(domain: str) -> re.Pattern:
    # "url": "https:\/\/x.trycloudflare.com" (cloudflared --logfile escribe JSON)
    dom = re.escape(domain)
    return re.compile(
        r'"url"\s*:\s*"(https:(?:\\?/){2}' + _NOT_PROVIDER + r'[A-Za-z0-9-]+\.' + dom + r'[^"\s]*)"',
        re.IGNORECASE,
    )

# orden: bare(1) → bare(2) → json(1) → json(2)
URL_PATTERNS = [_bare(d) for d in TUNNEL_DOMAINS] + [_json_field(d) for d in TUNNEL_DOMAINS]

# cualquiera de los dos dominios (usado también por el parcheo del HTML)
ANY_TUNNEL_URL = re.compile(
    r"https://" + _NOT_PROVIDER + r"[A-Za-z0-9-]+\.(?:" + "|".join(re.escape(d) for d in TUNNEL_DOMAINS) + r")" + _URL_TAIL,
    re.IGNORECASE,
)

def trim_url(url: str) -> str:
    return url.rstrip(".,;")

def find_tunnel_url(text: str) -> Optional[str]:
    """Devuelve la primera URL reconocida en `text` (sin . , ; finales) o None."""
    if not text:
        return None
    for pat in URL_PATTERNS:
        m = pat.search(text)
        if not m:
            continue
        url = m.group(1) if pat.groups else m.group(0)
        url = trim_url(url.replace("\\/", "/"))
        if url:
            return url
    return None
