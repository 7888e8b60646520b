"""Postal-code lookup with a session-scoped cache."""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass
from threading import Lock
from typing import Dict, Optional

from cadastro.common.errors import InvalidFormatError
from cadastro.sources.viacep_client import ViaCEPClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddressRecord:
    cep: str
    street: str
    neighborhood: str
    city: str
    state: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def normalize_cep(postal_code: str) -> str:
    """Returns the 8 digits of a CEP or raises ``InvalidFormatError``."""

    digits = re.sub(r"\D", "", postal_code or "")
    if len(digits) != 8:
        raise InvalidFormatError(f"CEP inválido: {postal_code!r}")
    return digits


class AddressLookup:
    """Resolves CEPs through ViaCEP, remembering every successful answer.

    The cache has no eviction; it lives as long as the instance (one form
    session, or the backend process).
    """

    def __init__(self, client: Optional[ViaCEPClient] = None) -> None:
        self.client = client or ViaCEPClient()
        self._cache_lock = Lock()
        self._cache: Dict[str, AddressRecord] = {}

    def lookup(self, postal_code: str) -> AddressRecord:
        cep = normalize_cep(postal_code)

        with self._cache_lock:
            cached = self._cache.get(cep)
        if cached is not None:
            logger.debug("CEP %s served from cache", cep)
            return cached

        payload = self.client.fetch(cep)
        record = AddressRecord(
            cep=cep,
            street=payload.get("logradouro") or "",
            neighborhood=payload.get("bairro") or "",
            city=payload.get("localidade") or "",
            state=payload.get("uf") or "",
        )

        with self._cache_lock:
            self._cache[cep] = record
        return record

    def is_cached(self, postal_code: str) -> bool:
        digits = re.sub(r"\D", "", postal_code or "")
        with self._cache_lock:
            return digits in self._cache

    def clear_cache(self) -> None:
        with self._cache_lock:
            self._cache.clear()
