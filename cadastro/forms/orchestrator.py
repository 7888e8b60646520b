"""Headless registration form: field state, events, tabs and submission."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import RLock
from typing import Dict, List, Mapping, Optional, Sequence

from cadastro.common.errors import AddressLookupError, ErrorKind
from cadastro.common.masking import Masker, MaskType, mask_document, only_digits
from cadastro.forms.debounce import Debouncer
from cadastro.forms.fields import FieldState
from cadastro.forms.sections import SameAddressSection, SpouseSection, is_checked
from cadastro.forms.submission import SubmissionError, SubmissionResult, Submitter
from cadastro.forms.tabs import TabController
from cadastro.sources.address_lookup import AddressLookup, AddressRecord
from cadastro.validation.engine import FieldValidator, ValidationResult, Validator
from cadastro.validation.rules import FieldConfig

logger = logging.getLogger(__name__)

CEP_FOUND_MESSAGE = "CEP válido! Endereço encontrado."
CEP_LOOKUP_MESSAGES = {
    ErrorKind.INVALID_FORMAT: "CEP inválido",
    ErrorKind.NOT_FOUND: "CEP não encontrado",
}
CEP_LOOKUP_FALLBACK = "Erro ao buscar o CEP"
SUBMIT_BLOCKED_MESSAGE = "Corrija os campos destacados antes de enviar."
SUBMIT_OK_MESSAGE = "Cadastro enviado com sucesso!"

DOCUMENT_MASKS = {
    "RG": MaskType.RG,
    "CNH": MaskType.CNH,
    "Passaporte": MaskType.PASSPORT,
}

# Fields whose values are logged only through ``mask_document``.
_SENSITIVE_MASKS = {MaskType.CPF, MaskType.CNPJ, MaskType.RG, MaskType.CNH, MaskType.PASSPORT}


@dataclass(frozen=True)
class AddressTarget:
    """The fields filled in from one CEP field."""

    street: str
    neighborhood: str
    city: str
    state: str
    number: Optional[str] = None

    def fields(self) -> List[str]:
        return [self.street, self.neighborhood, self.city, self.state]


class RegistrationForm:
    """Keeps every field's state and reacts to ``input``, ``change`` and ``blur`` events.

    All collaborators are injected. The optional ``debouncer`` validates a
    field shortly after typing stops; its callbacks look the field up by name
    so they always see the value current when they run.
    """

    def __init__(
        self,
        configs: Sequence[FieldConfig],
        tabs: Sequence[str],
        *,
        validator: Optional[Validator] = None,
        maskers: Optional[Mapping[MaskType, Masker]] = None,
        address_lookup: Optional[AddressLookup] = None,
        address_targets: Optional[Mapping[str, AddressTarget]] = None,
        submitter: Optional[Submitter] = None,
        debouncer: Optional[Debouncer] = None,
        same_address: Optional[SameAddressSection] = None,
        spouse: Optional[SpouseSection] = None,
        document_pairs: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.validator = validator or FieldValidator()
        self.maskers: Dict[MaskType, Masker] = dict(maskers or {})
        self.address_lookup = address_lookup
        self.address_targets = dict(address_targets or {})
        self.submitter = submitter
        self.debouncer = debouncer
        self.same_address = same_address
        self.spouse = spouse
        self.document_pairs = dict(document_pairs or {})

        self.fields: Dict[str, FieldState] = {}
        for config in configs:
            if config.name in self.fields:
                raise ValueError(f"Campo duplicado: {config.name}")
            if config.tab >= len(tabs):
                raise ValueError(f"Campo '{config.name}' aponta para aba inexistente {config.tab}")
            self.fields[config.name] = FieldState(config, masker=self._masker(config.mask))

        self.tabs = TabController(tabs, self.validate_tab)
        self.focused: Optional[str] = None
        self.status: Optional[str] = None
        self._lock = RLock()
        self._apply_sections()

    # -- lookups ---------------------------------------------------------

    def field(self, name: str) -> FieldState:
        try:
            return self.fields[name]
        except KeyError:
            raise KeyError(f"Campo desconhecido: {name}") from None

    def value(self, name: str) -> str:
        return self.field(name).value

    def values(self) -> Dict[str, str]:
        return {name: state.value for name, state in self.fields.items()}

    def fields_in_tab(self, index: int) -> List[FieldState]:
        return [state for state in self.fields.values() if state.tab == index]

    def errors(self) -> Dict[str, str]:
        return {name: state.message or "" for name, state in self.fields.items() if state.invalid}

    def _masker(self, mask_type: Optional[MaskType]) -> Optional[Masker]:
        if mask_type is None:
            return None
        masker = self.maskers.get(mask_type)
        if masker is None:
            masker = self.maskers[mask_type] = Masker(mask_type)
        return masker

    # -- events ----------------------------------------------------------

    def input(self, name: str, value: str, caret: Optional[int] = None) -> FieldState:
        with self._lock:
            state = self.field(name)
            self.focused = name
            if state.masker is not None:
                masked = state.masker.reformat(value, caret)
                state.value, state.caret = masked.text, masked.caret
            else:
                state.value = value or ""
                state.caret = len(state.value) if caret is None else caret
            self._propagate(name)

            if name in self.address_targets:
                digits = only_digits(state.value)
                if len(digits) == 8:
                    self.lookup_address(name)
                elif not digits:
                    self._clear_address(name)

            if self.debouncer is not None:
                self.debouncer.schedule(name, self._validate_later)
            return state

    def change(self, name: str, value: object) -> FieldState:
        """Select and checkbox changes; checkboxes store ``"on"`` or ``""``."""

        with self._lock:
            state = self.field(name)
            if isinstance(value, bool):
                value = "on" if value else ""
            state.value = "" if value is None else str(value)

            if self.same_address is not None and self.same_address.controls(name):
                self.same_address.toggle(self.fields, is_checked(state.value))
            if self.spouse is not None and self.spouse.controls(name):
                self.spouse.apply(self.fields, state.value)
            if name in self.document_pairs:
                self._switch_document_type(name)
            self._propagate(name)

            if state.invalid or state.value:
                self.validate_field(name)
            return state

    def blur(self, name: str) -> ValidationResult:
        with self._lock:
            state = self.field(name)
            if state.masker is not None:
                state.value = state.masker.mask(state.value)
                state.caret = len(state.value)
                self._propagate(name)
            if self.focused == name:
                self.focused = None

            result = self.validate_field(name)
            if name in self.address_targets and len(only_digits(state.value)) == 8:
                self.lookup_address(name)
            return result

    def _validate_later(self, name: str) -> None:
        with self._lock:
            if name in self.fields and self.fields[name].visible:
                self.validate_field(name)

    def _propagate(self, name: str) -> None:
        if self.same_address is not None:
            self.same_address.mirror(self.fields, name)

    def _switch_document_type(self, type_field: str) -> None:
        number = self.field(self.document_pairs[type_field])
        mask_type = DOCUMENT_MASKS.get(self.value(type_field))
        number.masker = self._masker(mask_type)
        number.clear()
        logger.debug("Document type for %s set to %s", number.name, self.value(type_field) or "-")

    def _apply_sections(self) -> None:
        if self.spouse is not None:
            self.spouse.apply(self.fields, self.value(self.spouse.selector))
        if self.same_address is not None:
            self.same_address.toggle(self.fields, is_checked(self.value(self.same_address.checkbox)))
        self._apply_document_maskers()

    # -- address lookup --------------------------------------------------

    def lookup_address(self, cep_field: str) -> Optional[AddressRecord]:
        """Fills the address fed by ``cep_field``; failures only show up as the field's message."""

        if self.address_lookup is None:
            return None
        target = self.address_targets[cep_field]
        state = self.field(cep_field)
        try:
            record = self.address_lookup.lookup(state.value)
        except AddressLookupError as exc:
            logger.warning("CEP lookup failed for %s (%s): %s", cep_field, exc.kind.value, exc)
            state.fail_lookup(CEP_LOOKUP_MESSAGES.get(exc.kind, CEP_LOOKUP_FALLBACK))
            return None

        for name, value in zip(
            target.fields(),
            (record.street, record.neighborhood, record.city, record.state),
        ):
            self._assign(name, value)
        state.lookup_error = None
        state.mark_valid(CEP_FOUND_MESSAGE)
        if target.number is not None:
            self.focused = target.number
        logger.info("Address filled for %s from CEP %s", cep_field, record.cep)
        return record

    def _clear_address(self, cep_field: str) -> None:
        for name in self.address_targets[cep_field].fields():
            self._assign(name, "")
        cep = self.field(cep_field)
        cep.lookup_error = None
        cep.mark_valid()

    def _assign(self, name: str, value: str) -> None:
        state = self.field(name)
        state.value = state.masker.mask(value) if state.masker is not None else value
        if state.invalid and state.value:
            state.mark_valid()
        self._propagate(name)

    # -- validation ------------------------------------------------------

    def validate_field(self, name: str, show_errors: bool = True) -> ValidationResult:
        state = self.field(name)
        if not state.visible:
            return ValidationResult.ok()
        result = self.validator.validate(state.value, state.rules, self.values())
        if show_errors:
            lookup_error = state.pending_lookup_error()
            if result.is_valid and lookup_error is not None:
                state.mark(lookup_error)
            elif result.is_valid:
                if state.invalid:
                    state.mark_valid()
            else:
                state.mark(result.message or "")
        return result

    def validate_tab(self, index: int, show_errors: bool = True) -> bool:
        valid = True
        for state in self.fields_in_tab(index):
            if not state.visible:
                continue
            if not (state.required or state.value.strip()):
                continue
            if not self.validate_field(state.name, show_errors).is_valid:
                valid = False
        return valid

    # -- navigation ------------------------------------------------------

    def next(self) -> bool:
        with self._lock:
            return self.tabs.next()

    def prev(self) -> bool:
        with self._lock:
            return self.tabs.prev()

    def jump_to(self, tab: int | str) -> bool:
        with self._lock:
            return self.tabs.jump_to(tab)

    @property
    def active_tab(self) -> str:
        return self.tabs.active_id

    # -- submission ------------------------------------------------------

    def submit(self) -> SubmissionResult:
        with self._lock:
            first = self.tabs.first_invalid(show_errors=True)
            if first is not None:
                self.tabs.jump_to(first)
                self.status = SUBMIT_BLOCKED_MESSAGE
                logger.info("Submission blocked, first invalid tab: %s", self.tabs.tabs[first])
                return SubmissionResult(
                    submitted=False,
                    tab=self.tabs.tabs[first],
                    errors=self.errors(),
                    message=self.status,
                )

            data = self.serialize()
            if self.submitter is None:
                self.status = None
                return SubmissionResult(submitted=False, message="Nenhum destino de envio configurado")
            try:
                response = self.submitter.submit(data)
            except SubmissionError as exc:
                logger.error("Submission failed: %s", exc)
                self.status = str(exc)
                return SubmissionResult(submitted=False, message=self.status)

            self.status = SUBMIT_OK_MESSAGE
            logger.info("Registration submitted for %s", self._describe_owner())
            return SubmissionResult(submitted=True, response=response, message=self.status)

    def _describe_owner(self) -> str:
        for state in self.fields.values():
            if state.config.mask in _SENSITIVE_MASKS and state.value:
                return mask_document(state.value)
        return "-"

    # -- serialization ---------------------------------------------------

    def serialize(self, unmasked: bool = False) -> Dict[str, str]:
        data: Dict[str, str] = {}
        for name, state in self.fields.items():
            value = state.value
            if unmasked and state.masker is not None:
                value = state.masker.unmask(value)
            data[name] = value
        return data

    def fill(self, data: Mapping[str, object]) -> None:
        """Pre-fills values through their masks, then re-applies the conditional sections."""

        with self._lock:
            unknown = [name for name in data if name not in self.fields]
            if unknown:
                logger.warning("Ignoring unknown fields on fill: %s", ", ".join(sorted(unknown)))
            for type_field in self.document_pairs:
                if type_field in data:
                    self.field(type_field).value = str(data[type_field] or "")
            self._apply_document_maskers()
            for name, value in data.items():
                if name not in self.fields or name in self.document_pairs:
                    continue
                state = self.fields[name]
                if isinstance(value, bool):
                    value = "on" if value else ""
                text = "" if value is None else str(value)
                state.value = state.masker.mask(text) if state.masker is not None else text
                state.caret = len(state.value)
            self._apply_sections()

    def _apply_document_maskers(self) -> None:
        for type_field, number_field in self.document_pairs.items():
            self.field(number_field).masker = self._masker(DOCUMENT_MASKS.get(self.value(type_field)))

    def reset(self) -> None:
        with self._lock:
            for state in self.fields.values():
                state.clear()
                state.visible = True
                state.required = state.config.rules.required
                state.masker = self._masker(state.config.mask)
            self._apply_sections()
            self.tabs.reset()
            self.focused = None
            self.status = None
