from __future__ import annotations


class ProxyError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ClientInputError(ProxyError):
    status_code = 400


class ConfigurationError(ProxyError):
    status_code = 500


class UpstreamError(ProxyError):
    status_code = 502
