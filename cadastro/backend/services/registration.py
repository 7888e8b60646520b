"""Server-side re-validation of submitted registrations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, Mapping, Optional

from cadastro.backend import metrics
from cadastro.common.masking import mask_document
from cadastro.common.settings import Settings, get_settings
from cadastro.forms.investor import build_investor_form

logger = logging.getLogger(__name__)


@dataclass
class RegistrationOutcome:
    accepted: bool
    errors: Dict[str, str] = field(default_factory=dict)
    data: Dict[str, str] = field(default_factory=dict)


class RegistrationService:
    """Runs a submitted flat mapping through the same field rules the form uses."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._today = today

    def register(self, payload: Mapping[str, Any]) -> RegistrationOutcome:
        form = build_investor_form(self.settings, today=self._today, offline=True)
        form.fill({name: value for name, value in payload.items() if name in form.fields})
        first = form.tabs.first_invalid(show_errors=True)
        if first is not None:
            metrics.registrations.labels(outcome="rejected").inc()
            logger.info("Registration rejected with %s invalid field(s)", len(form.errors()))
            return RegistrationOutcome(accepted=False, errors=form.errors())

        data = form.serialize(unmasked=True)
        metrics.registrations.labels(outcome="accepted").inc()
        logger.info("Registration accepted for CPF %s", mask_document(data.get("cpf", "")))
        return RegistrationOutcome(accepted=True, data=data)
