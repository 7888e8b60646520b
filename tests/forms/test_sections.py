import pytest

from cadastro.forms.fields import FieldState
from cadastro.forms.sections import SameAddressSection, SpouseSection, is_checked
from cadastro.validation.rules import FieldConfig, RuleSet


def _fields(*names):
    return {name: FieldState(FieldConfig(name=name, rules=RuleSet())) for name in names}


@pytest.mark.parametrize("value, expected", [(True, True), ("on", True), ("true", True), ("", False), (None, False), (False, False)])
def test_is_checked(value, expected):
    assert is_checked(value) is expected


def test_same_address_copies_and_hides_when_checked():
    fields = _fields("cep", "rua", "corresp_cep", "corresp_rua")
    fields["cep"].value = "01310-100"
    fields["rua"].value = "Avenida Paulista"
    fields["corresp_rua"].mark("Este campo é obrigatório")
    section = SameAddressSection("mesmo", [("cep", "corresp_cep"), ("rua", "corresp_rua")])

    section.toggle(fields, True)

    assert fields["corresp_cep"].value == "01310-100"
    assert fields["corresp_rua"].value == "Avenida Paulista"
    assert not fields["corresp_rua"].visible
    assert not fields["corresp_rua"].invalid


def test_same_address_mirrors_only_while_checked():
    fields = _fields("rua", "corresp_rua")
    section = SameAddressSection("mesmo", [("rua", "corresp_rua")])

    fields["rua"].value = "Rua A"
    assert section.mirror(fields, "rua") is None
    assert fields["corresp_rua"].value == ""

    section.toggle(fields, True)
    fields["rua"].value = "Rua B"
    assert section.mirror(fields, "rua") == "corresp_rua"
    assert fields["corresp_rua"].value == "Rua B"

    section.toggle(fields, False)
    assert fields["corresp_rua"].visible
    fields["rua"].value = "Rua C"
    section.mirror(fields, "rua")
    assert fields["corresp_rua"].value == "Rua B"


def test_spouse_section_required_when_married():
    fields = _fields("conjuge_nome", "conjuge_nome_pai")
    section = SpouseSection("estado_civil", ["conjuge_nome", "conjuge_nome_pai"], optional=["conjuge_nome_pai"])

    section.apply(fields, "Casado(a)")

    assert section.active
    assert fields["conjuge_nome"].visible and fields["conjuge_nome"].required
    assert fields["conjuge_nome_pai"].visible and not fields["conjuge_nome_pai"].required


def test_spouse_section_union_counts_as_partnered():
    assert SpouseSection("estado_civil", []).requires_spouse("União Estável")


def test_spouse_section_hidden_clears_everything():
    fields = _fields("conjuge_nome")
    section = SpouseSection("estado_civil", ["conjuge_nome"])
    section.apply(fields, "Casado(a)")
    fields["conjuge_nome"].value = "Ana"
    fields["conjuge_nome"].mark("Nome inválido")

    section.apply(fields, "Solteiro(a)")

    state = fields["conjuge_nome"]
    assert not section.active
    assert (state.value, state.visible, state.required, state.invalid, state.message) == ("", False, False, False, None)
