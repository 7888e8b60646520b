"""Client for the Pluggy open-banking connect-token exchange."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import requests

logger = logging.getLogger(__name__)


class PluggyError(RuntimeError):
    """Raised when Pluggy answers a step of the exchange with a non-2xx status."""

    def __init__(self, message: str, status_code: int, detail: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class PluggyAuthError(PluggyError):
    pass


class PluggyTokenError(PluggyError):
    pass


@dataclass
class PluggyClientConfig:
    base_url: str = "https://api.pluggy.ai"
    timeout: float = 10.0


class PluggyClient:
    """Two-step exchange: client credentials → API key → connect token."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        config: Optional[PluggyClientConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.config = config or PluggyClientConfig()
        self.session = session or requests.Session()

    def _url(self, endpoint: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    def authenticate(self) -> str:
        response = self.session.post(
            self._url("auth"),
            json={"clientId": self.client_id, "clientSecret": self.client_secret},
            timeout=self.config.timeout,
        )
        if not response.ok:
            raise PluggyAuthError(
                "Failed to authenticate with service provider.",
                status_code=response.status_code,
                detail=response.text,
            )
        return response.json()["apiKey"]

    def create_connect_token(self, api_key: str) -> str:
        response = self.session.post(
            self._url("connect_token"),
            headers={"X-API-KEY": api_key},
            timeout=self.config.timeout,
        )
        if not response.ok:
            raise PluggyTokenError(
                "Failed to create connect token.",
                status_code=response.status_code,
                detail=response.text,
            )
        return response.json()["accessToken"]

    def get_connect_token(self) -> str:
        api_key = self.authenticate()
        token = self.create_connect_token(api_key)
        logger.info("Connect token issued")
        return token
