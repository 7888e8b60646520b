"""Client for the IBGE localities API (states and municipalities)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import Lock
from typing import Dict, List, Optional

import requests

from cadastro.common.errors import InvalidFormatError, NetworkError, ServiceError

logger = logging.getLogger(__name__)

BRAZILIAN_STATES: Dict[str, str] = {
    "AC": "Acre",
    "AL": "Alagoas",
    "AP": "Amapá",
    "AM": "Amazonas",
    "BA": "Bahia",
    "CE": "Ceará",
    "DF": "Distrito Federal",
    "ES": "Espírito Santo",
    "GO": "Goiás",
    "MA": "Maranhão",
    "MT": "Mato Grosso",
    "MS": "Mato Grosso do Sul",
    "MG": "Minas Gerais",
    "PA": "Pará",
    "PB": "Paraíba",
    "PR": "Paraná",
    "PE": "Pernambuco",
    "PI": "Piauí",
    "RJ": "Rio de Janeiro",
    "RN": "Rio Grande do Norte",
    "RS": "Rio Grande do Sul",
    "RO": "Rondônia",
    "RR": "Roraima",
    "SC": "Santa Catarina",
    "SP": "São Paulo",
    "SE": "Sergipe",
    "TO": "Tocantins",
}


@dataclass
class IBGEClientConfig:
    base_url: str = "https://servicodados.ibge.gov.br"
    timeout: float = 10.0


class IBGEClient:
    """Lists states and their municipalities; municipality lists are cached per UF."""

    def __init__(
        self,
        config: Optional[IBGEClientConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config or IBGEClientConfig()
        self.session = session or requests.Session()
        self._cities_lock = Lock()
        self._cities: Dict[str, List[Dict]] = {}

    def _get(self, endpoint: str) -> List[Dict]:
        url = f"{self.config.base_url.rstrip('/')}/api/v1/localidades/{endpoint.lstrip('/')}"
        try:
            response = self.session.get(url, timeout=self.config.timeout)
        except requests.RequestException as exc:
            raise NetworkError(f"Falha de rede ao consultar o IBGE: {exc}") from exc
        if not 200 <= response.status_code < 300:
            raise ServiceError(
                f"IBGE respondeu {response.status_code} para '{endpoint}'",
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise NetworkError(f"Resposta ilegível do IBGE para '{endpoint}'") from exc
        if not isinstance(payload, list):
            raise ServiceError(f"Unexpected payload format for endpoint '{endpoint}'")
        return payload

    @staticmethod
    def _sorted_by_name(items: List[Dict]) -> List[Dict]:
        return sorted(items, key=lambda item: str(item.get("nome", "")))

    def list_states(self) -> List[Dict]:
        return self._sorted_by_name(self._get("estados"))

    def list_cities(self, uf: str) -> List[Dict]:
        uf = (uf or "").strip().upper()
        if uf not in BRAZILIAN_STATES:
            raise InvalidFormatError(f"UF desconhecida: {uf!r}")

        with self._cities_lock:
            cached = self._cities.get(uf)
        if cached is not None:
            return cached

        cities = self._sorted_by_name(self._get(f"estados/{uf}/municipios"))
        logger.debug("Fetched %s municipalities for %s", len(cities), uf)
        with self._cities_lock:
            self._cities[uf] = cities
        return cities
