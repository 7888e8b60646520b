"""Pydantic models describing per-field validation rules and field setup."""

from __future__ import annotations

import re
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from cadastro.common.masking import MaskType

DEFAULT_MESSAGES: Dict[str, str] = {
    "required": "Este campo é obrigatório",
    "email": "Por favor, insira um email válido",
    "cpf": "CPF inválido",
    "cnpj": "CNPJ inválido",
    "cep": "CEP inválido",
    "phone": "Telefone inválido",
    "min_length": "Este campo deve ter no mínimo {0} caracteres",
    "max_length": "Este campo deve ter no máximo {0} caracteres",
    "pattern": "Formato inválido",
    "match": "Os campos não coincidem",
    "date": "Data inválida",
    "age": "Idade mínima de 18 anos requerida",
    "issuance_date": "Data de expedição inválida ou futura",
    "document_number": "Número de documento inválido",
    "name": "Nome inválido",
}

# Which masks each content rule accepts; ``None`` means an unmasked field.
_COMPATIBLE_MASKS = {
    "cpf": {None, MaskType.CPF},
    "cnpj": {None, MaskType.CNPJ},
    "phone": {None, MaskType.PHONE},
    "cep": {None, MaskType.CEP},
    "date": {None, MaskType.DATE},
    "age": {None, MaskType.DATE},
    "issuance_date": {None, MaskType.DATE},
    "name": {None},
    "email": {None},
    "document_number": {None, MaskType.RG, MaskType.CNH, MaskType.PASSPORT},
}


def format_message(message: str, *params: object) -> str:
    """Replaces ``{0}``, ``{1}``... placeholders, leaving unknown ones untouched."""

    def _replace(match: re.Match) -> str:
        index = int(match.group(1))
        return str(params[index]) if index < len(params) else match.group(0)

    return re.sub(r"\{(\d+)\}", _replace, message)


class RuleSet(BaseModel):
    required: bool = False
    name: bool = False
    cpf: bool = False
    cnpj: bool = False
    email: bool = False
    phone: bool = False
    cep: bool = False
    date: bool = False
    age: bool = False
    issuance_date: bool = False
    document_number: Optional[str] = None
    min_length: Optional[int] = Field(default=None, ge=0)
    max_length: Optional[int] = Field(default=None, ge=0)
    pattern: Optional[str] = None
    match: Optional[str] = None
    messages: Dict[str, str] = Field(default_factory=dict)

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("pattern")
    @classmethod
    def compile_pattern(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(f"Expressão regular inválida: {exc}") from exc
        return value

    @model_validator(mode="after")
    def check_lengths(self) -> "RuleSet":
        if (
            self.min_length is not None
            and self.max_length is not None
            and self.min_length > self.max_length
        ):
            raise ValueError("min_length maior que max_length")
        unknown = set(self.messages) - set(DEFAULT_MESSAGES)
        if unknown:
            raise ValueError(f"Mensagens para regras desconhecidas: {sorted(unknown)}")
        return self

    def active_rules(self) -> Dict[str, object]:
        """Rule name to parameter for every rule switched on."""

        return {
            name: value
            for name, value in self.model_dump(exclude={"messages"}).items()
            if value not in (False, None)
        }

    def message_for(self, rule: str, *params: object) -> str:
        template = self.messages.get(rule) or DEFAULT_MESSAGES[rule]
        return format_message(template, *params)

    def with_required(self, required: bool) -> "RuleSet":
        return self.model_copy(update={"required": required})


class FieldConfig(BaseModel):
    name: str
    label: str = ""
    tab: int = Field(default=0, ge=0)
    mask: Optional[MaskType] = None
    rules: RuleSet = Field(default_factory=RuleSet)
    section: Optional[str] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_alphabet(self) -> "FieldConfig":
        for rule, masks in _COMPATIBLE_MASKS.items():
            if getattr(self.rules, rule) and self.mask not in masks:
                raise ValueError(
                    f"Campo '{self.name}': máscara '{self.mask.value}' incompatível com a regra '{rule}'",
                )
        return self
