"""Server-side exchange of Pluggy credentials for a connect token."""

from __future__ import annotations

import logging
from typing import Optional

import requests

from cadastro.backend import metrics
from cadastro.common.settings import Settings, get_settings
from cadastro.sources.pluggy_client import PluggyClient, PluggyClientConfig, PluggyError

logger = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    pass


class ConnectTokenService:
    """Keeps the Pluggy credentials on the server and hands out short-lived connect tokens."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.session = session or requests.Session()

    def _client(self) -> PluggyClient:
        client_id = self.settings.pluggy_client_id
        client_secret = self.settings.pluggy_client_secret
        if not client_id or not client_secret:
            logger.error("PLUGGY_CLIENT_ID and PLUGGY_CLIENT_SECRET are not set")
            raise ConfigurationError("Server configuration error.")
        return PluggyClient(
            client_id,
            client_secret,
            PluggyClientConfig(
                base_url=self.settings.pluggy_base_url,
                timeout=self.settings.http_timeout_seconds,
            ),
            session=self.session,
        )

    def get_connect_token(self) -> str:
        try:
            token = self._client().get_connect_token()
        except ConfigurationError:
            metrics.connect_token_requests.labels(outcome="misconfigured").inc()
            raise
        except PluggyError as exc:
            logger.error("%s (status %s): %s", exc, exc.status_code, exc.detail)
            metrics.connect_token_requests.labels(outcome="upstream_error").inc()
            raise
        except (requests.RequestException, KeyError, ValueError):
            metrics.connect_token_requests.labels(outcome="error").inc()
            raise
        metrics.connect_token_requests.labels(outcome="success").inc()
        return token
