# reescritura de la página de redirección
#
# Orden: meta refresh → URL suelta del túnel → documento mínimo nuevo.

from __future__ import annotations
import re
from typing import Tuple

from tunnelpage.discovery.log_url import ANY_TUNNEL_URL

META_REFRESH = re.compile(r"<meta\b[^>]*?http-equiv\s*=\s*[\"']?refresh\b[^>]*>", re.IGNORECASE)
CONTENT_ATTR = re.compile(r"(?<![\w-])content\s*=\s*([\"'])(.*?)\1", re.IGNORECASE | re.DOTALL)
REFRESH_URL = re.compile(r"\burl\s*=\s*['\"]?([^\"'>\s]+)", re.IGNORECASE)

MINIMAL_TEMPLATE = '<!doctype html>\n<meta http-equiv="refresh" content="0; url={url}">\n'

def minimal_document(url: str) -> str:
    return MINIMAL_TEMPLATE.format(url=url)

def _splice(text: str, start: int, end: int, new: str) -> str:
    return text[:start] + new + text[end:]

def _patch_meta(text: str, url: str):
    tag = META_REFRESH.search(text)
    if not tag:
        return None
    # solo dentro de content="…; url=…" (otros atributos *url= no cuentan)
    content = CONTENT_ATTR.search(tag.group(0))
    if not content:
        return None
    m = REFRESH_URL.search(content.group(2))
    if not m:
        return None
    start = tag.start() + content.start(2) + m.start(1)
    end = tag.start() + content.start(2) + m.end(1)
    return _splice(text, start, end, url)

def _patch_bare(text: str, url: str):
    m = ANY_TUNNEL_URL.search(text)
    if not m:
        return None
    old = m.group(0).rstrip(".,;")
    return _splice(text, m.start(), m.start() + len(old), url)

def patch_redirect(text: str, url: str) -> Tuple[str, str]:
    """
    Sustituye una sola URL en `text` por `url`.
    Devuelve (texto_nuevo, estrategia) con estrategia en
    "meta" | "bare" | "synthesized".
    """
    patched = _patch_meta(text, url)
    if patched is not None:
        return patched, "meta"

    patched = _patch_bare(text, url)
    if patched is not None:
        return patched, "bare"

    return minimal_document(url), "synthesized"
