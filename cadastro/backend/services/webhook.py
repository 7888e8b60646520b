"""Relays incoming Pluggy webhook events to the automation hook."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import requests

from cadastro.backend import metrics
from cadastro.common.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class WebhookForwarder:
    """Forwards webhook bodies to ``MAKE_WEBHOOK_URL``; failures are logged and never raised."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.session = session or requests.Session()

    @property
    def url(self) -> Optional[str]:
        return self.settings.make_webhook_url

    def forward(self, payload: Any) -> bool:
        logger.info("Webhook event received: %s", json.dumps(payload, ensure_ascii=False))
        if not self.url:
            metrics.webhook_forwards.labels(outcome="skipped").inc()
            return False

        try:
            response = self.session.post(self.url, json=payload, timeout=self.settings.http_timeout_seconds)
        except requests.RequestException as exc:
            logger.error("Error forwarding webhook: %s", exc)
            metrics.webhook_forwards.labels(outcome="error").inc()
            return False

        if not response.ok:
            logger.error("Webhook forward failed: %s %s", response.status_code, response.reason)
            metrics.webhook_forwards.labels(outcome="failed").inc()
            return False

        logger.info("Webhook forwarded")
        metrics.webhook_forwards.labels(outcome="success").inc()
        return True
