"""The investor registration form: fields, tabs and default collaborators."""

from __future__ import annotations

import re
from datetime import date
from typing import Callable, List, Optional

import requests

from cadastro.common.masking import MaskType
from cadastro.common.settings import Settings, get_settings
from cadastro.forms.debounce import Debouncer, Scheduler, timer_scheduler
from cadastro.forms.orchestrator import AddressTarget, RegistrationForm
from cadastro.forms.sections import SameAddressSection, SpouseSection
from cadastro.forms.submission import FormSubmitter, FormSubmitterConfig, Submitter
from cadastro.sources.address_lookup import AddressLookup
from cadastro.sources.viacep_client import ViaCEPClient, ViaCEPClientConfig
from cadastro.validation.engine import FieldValidator
from cadastro.validation.formats import DOCUMENT_TYPES
from cadastro.validation.rules import FieldConfig, RuleSet

TABS = ["dados-pessoais", "documentos", "endereco", "perfil-financeiro"]
PERSONAL, DOCUMENTS, ADDRESS, FINANCIAL = range(len(TABS))

MARITAL_STATUSES = ["Solteiro(a)", "Casado(a)", "União Estável", "Divorciado(a)", "Viúvo(a)"]
RISK_PROFILES = ["Conservador", "Moderado", "Arrojado"]

SPOUSE_FIELDS = [
    "conjuge_nome",
    "conjuge_sexo",
    "conjuge_cpf",
    "conjuge_nacionalidade",
    "conjuge_naturalidade",
    "conjuge_data_nascimento",
    "conjuge_tipo_documento",
    "conjuge_numero_documento",
    "conjuge_data_expedicao",
    "conjuge_orgao_emissor",
    "conjuge_nome_mae",
    "conjuge_nome_pai",
]
SPOUSE_OPTIONAL = ["conjuge_nome_pai"]

ADDRESS_PARTS = ["cep", "logradouro", "numero", "complemento", "bairro", "cidade", "estado"]
CORRESPONDENCE_PREFIX = "corresp_"


def _field(
    field_name: str,
    label: str,
    tab: int,
    mask: Optional[MaskType] = None,
    section: Optional[str] = None,
    **rules,
) -> FieldConfig:
    return FieldConfig(name=field_name, label=label, tab=tab, mask=mask, section=section, rules=RuleSet(**rules))


def _choice(options: List[str]) -> dict:
    """Rules restricting a select to its options."""

    return {
        "pattern": "^(" + "|".join(re.escape(option) for option in options) + ")$",
        "messages": {"pattern": "Selecione uma opção válida"},
    }


def _address_fields(prefix: str, section: str) -> List[FieldConfig]:
    return [
        _field(f"{prefix}cep", "CEP", ADDRESS, MaskType.CEP, section, required=True, cep=True),
        _field(f"{prefix}logradouro", "Logradouro", ADDRESS, None, section, required=True, max_length=120),
        _field(f"{prefix}numero", "Número", ADDRESS, None, section, required=True, max_length=10),
        _field(f"{prefix}complemento", "Complemento", ADDRESS, None, section, max_length=60),
        _field(f"{prefix}bairro", "Bairro", ADDRESS, None, section, required=True, max_length=80),
        _field(f"{prefix}cidade", "Cidade", ADDRESS, None, section, required=True, max_length=80),
        _field(f"{prefix}estado", "Estado", ADDRESS, None, section, required=True, pattern=r"^[A-Z]{2}$"),
    ]


def investor_fields() -> List[FieldConfig]:
    spouse = "conjuge"
    return [
        # dados pessoais
        _field("nome_completo", "Nome completo", PERSONAL, required=True, name=True, min_length=3, max_length=120),
        _field("cpf", "CPF", PERSONAL, MaskType.CPF, required=True, cpf=True),
        _field("data_nascimento", "Data de nascimento", PERSONAL, MaskType.DATE, required=True, age=True),
        _field("sexo", "Sexo", PERSONAL, required=True),
        _field("nacionalidade", "Nacionalidade", PERSONAL, required=True, name=True),
        _field("naturalidade", "Naturalidade", PERSONAL, name=True),
        _field("nome_mae", "Nome da mãe", PERSONAL, required=True, name=True),
        _field("nome_pai", "Nome do pai", PERSONAL, name=True),
        _field("email", "Email", PERSONAL, required=True, email=True),
        _field("confirmacao_email", "Confirmação de email", PERSONAL, required=True, match="email"),
        _field("telefone", "Telefone", PERSONAL, MaskType.PHONE, required=True, phone=True),
        _field("estado_civil", "Estado civil", PERSONAL, required=True, **_choice(MARITAL_STATUSES)),
        # cônjuge: obrigatoriedade controlada pelo estado civil
        _field("conjuge_nome", "Nome do cônjuge", PERSONAL, None, spouse, name=True),
        _field("conjuge_sexo", "Sexo do cônjuge", PERSONAL, None, spouse),
        _field("conjuge_cpf", "CPF do cônjuge", PERSONAL, MaskType.CPF, spouse, cpf=True),
        _field("conjuge_nacionalidade", "Nacionalidade do cônjuge", PERSONAL, None, spouse, name=True),
        _field("conjuge_naturalidade", "Naturalidade do cônjuge", PERSONAL, None, spouse, name=True),
        _field("conjuge_data_nascimento", "Data de nascimento do cônjuge", PERSONAL, MaskType.DATE, spouse, date=True),
        _field("conjuge_tipo_documento", "Tipo de documento do cônjuge", PERSONAL, None, spouse, **_choice(DOCUMENT_TYPES)),
        _field(
            "conjuge_numero_documento",
            "Número do documento do cônjuge",
            PERSONAL,
            None,
            spouse,
            document_number="conjuge_tipo_documento",
        ),
        _field("conjuge_data_expedicao", "Data de expedição do cônjuge", PERSONAL, MaskType.DATE, spouse, issuance_date=True),
        _field("conjuge_orgao_emissor", "Órgão emissor do cônjuge", PERSONAL, None, spouse, max_length=20),
        _field("conjuge_nome_mae", "Nome da mãe do cônjuge", PERSONAL, None, spouse, name=True),
        _field("conjuge_nome_pai", "Nome do pai do cônjuge", PERSONAL, None, spouse, name=True),
        # documentos
        _field("tipo_documento", "Tipo de documento", DOCUMENTS, required=True, **_choice(DOCUMENT_TYPES)),
        _field("numero_documento", "Número do documento", DOCUMENTS, required=True, document_number="tipo_documento"),
        _field("data_expedicao", "Data de expedição", DOCUMENTS, MaskType.DATE, required=True, issuance_date=True),
        _field("orgao_emissor", "Órgão emissor", DOCUMENTS, required=True, max_length=20),
        # endereço
        *_address_fields("", "residencia"),
        _field("mesmo_endereco", "Endereço de correspondência igual ao residencial", ADDRESS),
        *_address_fields(CORRESPONDENCE_PREFIX, "correspondencia"),
        # perfil financeiro
        _field("renda_mensal", "Renda mensal", FINANCIAL, MaskType.CURRENCY, required=True),
        _field("patrimonio", "Patrimônio estimado", FINANCIAL, MaskType.CURRENCY),
        _field("valor_investimento_inicial", "Investimento inicial", FINANCIAL, MaskType.CURRENCY, required=True),
        _field("aporte_mensal", "Aporte mensal", FINANCIAL, MaskType.CURRENCY),
        _field("perfil_risco", "Perfil de risco", FINANCIAL, required=True, **_choice(RISK_PROFILES)),
        _field("objetivo_financeiro", "Objetivo financeiro", FINANCIAL, max_length=200),
    ]


def _address_target(prefix: str) -> AddressTarget:
    return AddressTarget(
        street=f"{prefix}logradouro",
        neighborhood=f"{prefix}bairro",
        city=f"{prefix}cidade",
        state=f"{prefix}estado",
        number=f"{prefix}numero",
    )


def build_investor_form(
    settings: Optional[Settings] = None,
    *,
    session: Optional[requests.Session] = None,
    address_lookup: Optional[AddressLookup] = None,
    submitter: Optional[Submitter] = None,
    scheduler: Optional[Scheduler] = None,
    today: Optional[Callable[[], date]] = None,
    offline: bool = False,
) -> RegistrationForm:
    """Wires the investor form with collaborators built from ``settings``.

    ``offline`` leaves out the address lookup, submitter and debouncer, which
    is what the backend uses to re-validate a submitted registration.
    """

    settings = settings or get_settings()

    if not offline:
        session = session or requests.Session()
        if address_lookup is None:
            client = ViaCEPClient(
                ViaCEPClientConfig(base_url=settings.viacep_base_url, timeout=settings.http_timeout_seconds),
                session=session,
            )
            address_lookup = AddressLookup(client)
        if submitter is None:
            submitter = FormSubmitter(
                FormSubmitterConfig(url=settings.submit_url, timeout=settings.http_timeout_seconds),
                session=session,
            )
        debouncer = Debouncer(settings.validation_debounce_ms, scheduler or timer_scheduler)
    else:
        address_lookup = submitter = debouncer = None

    pairs = [(part, f"{CORRESPONDENCE_PREFIX}{part}") for part in ADDRESS_PARTS]
    return RegistrationForm(
        investor_fields(),
        TABS,
        validator=FieldValidator(today=today),
        address_lookup=address_lookup,
        address_targets={
            "cep": _address_target(""),
            f"{CORRESPONDENCE_PREFIX}cep": _address_target(CORRESPONDENCE_PREFIX),
        },
        submitter=submitter,
        debouncer=debouncer,
        same_address=SameAddressSection("mesmo_endereco", pairs),
        spouse=SpouseSection("estado_civil", SPOUSE_FIELDS, optional=SPOUSE_OPTIONAL),
        document_pairs={
            "tipo_documento": "numero_documento",
            "conjuge_tipo_documento": "conjuge_numero_documento",
        },
    )
