# errores fatales del flujo (config → launch → extract → patch)

from __future__ import annotations


class TunnelPageError(Exception):
    """Base de todos los errores que abortan la ejecución (exit 1)."""


class MissingConfig(TunnelPageError):
    pass


class BinaryUnavailable(TunnelPageError):
    pass


class LaunchFailure(TunnelPageError):
    pass


class ExtractionTimeout(TunnelPageError):
    def __init__(self, message: str, log_tail: list[str] | None = None):
        super().__init__(message)
        self.log_tail = log_tail or []


class RemoteFetchFailure(TunnelPageError):
    pass


class RemotePushFailure(TunnelPageError):
    pass
