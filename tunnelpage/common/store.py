# almacén persistente por usuario (GH_OWNER, GH_REPO, GH_TOKEN, GH_BRANCH)

from __future__ import annotations
import os
import getpass
from pathlib import Path
from typing import Callable, Optional

from dotenv import get_key, set_key


class CredentialStore:
    """
    Fichero dotenv en el perfil del usuario. Las variables de entorno del
    proceso tienen prioridad al leer; al escribir siempre va al fichero.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def get(self, key: str) -> str:
        v = os.environ.get(key, "").strip()
        if v:
            return v
        if not self.path.exists():
            return ""
        return (get_key(str(self.path), key) or "").strip()

    def set(self, key: str, value: str) -> None:
        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.touch(mode=0o600)
        set_key(str(self.path), key, value)
        print(f"[CONFIG] {key} guardado en {self.path}")


def resolve_value(store: CredentialStore, key: str, prompt_text: str,
                  sensitive: bool = False, default: Optional[str] = None,
                  prompt: Optional[Callable[[str], str]] = None,
                  secret_prompt: Optional[Callable[[str], str]] = None) -> str:
    """
    almacén → (default | pregunta) → guardar → devolver.
    Un valor vacío introducido por el usuario no se guarda.
    """
    value = store.get(key)
    if value:
        return value

    if default is not None:
        value = default
    else:
        ask = (secret_prompt or getpass.getpass) if sensitive else (prompt or input)
        value = (ask(prompt_text) or "").strip()

    if value:
        store.set(key, value)
    return value
