"""CEP and IBGE lookups shared by the API routes and the CLI."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import requests

from cadastro.backend import metrics
from cadastro.common.errors import AddressLookupError
from cadastro.common.settings import Settings, get_settings
from cadastro.sources.address_lookup import AddressLookup, AddressRecord
from cadastro.sources.ibge_client import IBGEClient, IBGEClientConfig
from cadastro.sources.viacep_client import ViaCEPClient, ViaCEPClientConfig

logger = logging.getLogger(__name__)


class LocationService:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.settings = settings or get_settings()
        session = session or requests.Session()
        timeout = self.settings.http_timeout_seconds
        self.address_lookup = AddressLookup(
            ViaCEPClient(ViaCEPClientConfig(base_url=self.settings.viacep_base_url, timeout=timeout), session),
        )
        self.ibge = IBGEClient(IBGEClientConfig(base_url=self.settings.ibge_base_url, timeout=timeout), session)

    def lookup_cep(self, cep: str) -> AddressRecord:
        cached = self.address_lookup.is_cached(cep)
        try:
            record = self.address_lookup.lookup(cep)
        except AddressLookupError as exc:
            logger.warning("CEP lookup failed (%s): %s", exc.kind.value, exc)
            metrics.address_lookups.labels(outcome=exc.kind.value).inc()
            raise
        metrics.address_lookups.labels(outcome="cache" if cached else "success").inc()
        return record

    def list_states(self) -> List[Dict]:
        return self.ibge.list_states()

    def list_cities(self, uf: str) -> List[Dict]:
        return self.ibge.list_cities(uf)
