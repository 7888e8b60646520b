"""Sends a validated registration to the backend."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Protocol

import requests

logger = logging.getLogger(__name__)


class SubmissionError(RuntimeError):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class Submitter(Protocol):
    def submit(self, data: Mapping[str, str]) -> Dict[str, Any]: ...


@dataclass
class FormSubmitterConfig:
    url: str = "http://localhost:3000/api/cadastro"
    timeout: float = 10.0


class FormSubmitter:
    """POSTs the flat field mapping as JSON; any non-2xx answer is a failed submission."""

    def __init__(
        self,
        config: Optional[FormSubmitterConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config or FormSubmitterConfig()
        self.session = session or requests.Session()

    def submit(self, data: Mapping[str, str]) -> Dict[str, Any]:
        try:
            response = self.session.post(self.config.url, json=dict(data), timeout=self.config.timeout)
        except requests.RequestException as exc:
            raise SubmissionError(f"Não foi possível enviar o cadastro: {exc}") from exc
        if not 200 <= response.status_code < 300:
            raise SubmissionError(
                f"Cadastro recusado pelo servidor ({response.status_code})",
                status_code=response.status_code,
            )
        logger.info("Registration posted to %s (%s)", self.config.url, response.status_code)
        try:
            body = response.json()
        except ValueError:
            body = {}
        return body if isinstance(body, dict) else {"data": body}


@dataclass
class SubmissionResult:
    submitted: bool
    tab: Optional[str] = None
    errors: Dict[str, str] = field(default_factory=dict)
    response: Optional[Dict[str, Any]] = None
    message: Optional[str] = None
