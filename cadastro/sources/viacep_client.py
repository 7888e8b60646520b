"""Client for the ViaCEP postal-code lookup service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from cadastro.common.errors import NetworkError, NotFoundError, ServiceError

logger = logging.getLogger(__name__)


@dataclass
class ViaCEPClientConfig:
    """Holds configuration for the ViaCEP client."""

    base_url: str = "https://viacep.com.br"
    timeout: float = 10.0


class ViaCEPClient:
    """Thin wrapper around ``GET /ws/{cep}/json/`` mapping failures to the lookup taxonomy."""

    def __init__(
        self,
        config: Optional[ViaCEPClientConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config or ViaCEPClientConfig()
        self.session = session or requests.Session()

    def fetch(self, cep: str) -> Dict[str, Any]:
        """Returns the raw payload for an 8-digit CEP."""

        url = f"{self.config.base_url.rstrip('/')}/ws/{cep}/json/"
        try:
            response = self.session.get(url, timeout=self.config.timeout)
        except requests.RequestException as exc:
            raise NetworkError(f"Falha de rede ao consultar o CEP {cep}: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise ServiceError(
                f"ViaCEP respondeu {response.status_code} para o CEP {cep}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise NetworkError(f"Resposta ilegível do ViaCEP para o CEP {cep}") from exc

        if not isinstance(payload, dict):
            raise ServiceError(f"Formato inesperado na resposta do ViaCEP para o CEP {cep}")

        if payload.get("erro") in (True, "true"):
            raise NotFoundError(f"CEP {cep} não encontrado")

        logger.debug("ViaCEP resolved %s to %s/%s", cep, payload.get("localidade"), payload.get("uf"))
        return payload
