import pytest

from cadastro.common.errors import ErrorKind
from cadastro.validation.checksums import (
    classify_document,
    cnpj_check_digits,
    cpf_check_digits,
    is_valid_cnpj,
    is_valid_cpf,
)

VALID_CPF = "11144477735"
VALID_CNPJ = "11222333000181"


def _mutations(digits):
    for index, digit in enumerate(digits):
        mutated = str((int(digit) + 1) % 10)
        yield digits[:index] + mutated + digits[index + 1 :]


def test_known_cpfs_are_valid():
    assert is_valid_cpf("111.444.777-35")
    assert is_valid_cpf("529.982.247-25")
    assert is_valid_cpf(VALID_CPF)


@pytest.mark.parametrize("value", ["000.000.000-00", "11111111111", "99999999999"])
def test_repeated_digit_cpfs_are_invalid(value):
    assert not is_valid_cpf(value)


def test_every_single_digit_cpf_mutation_is_invalid():
    for mutated in _mutations(VALID_CPF):
        assert not is_valid_cpf(mutated), mutated


def test_cpf_check_digits():
    assert cpf_check_digits("111444777") == (3, 5)


def test_cpf_rejects_wrong_length_and_non_strings():
    assert not is_valid_cpf("1114447773")
    assert not is_valid_cpf(None)
    assert not is_valid_cpf(11144477735)


def test_known_cnpj_is_valid():
    assert is_valid_cnpj("11.222.333/0001-81")
    assert cnpj_check_digits("112223330001") == (8, 1)


def test_zero_cnpj_is_invalid():
    assert not is_valid_cnpj("00.000.000/0000-00")


def test_every_single_digit_cnpj_mutation_is_invalid():
    for mutated in _mutations(VALID_CNPJ):
        assert not is_valid_cnpj(mutated), mutated


def test_classify_document_distinguishes_checksum_from_format():
    assert classify_document("111.444.777-35", "cpf") is None
    assert classify_document("111.444.777-36", "cpf") is ErrorKind.CHECKSUM_FAILURE
    assert classify_document("111.444", "cpf") is ErrorKind.INVALID_FORMAT
    assert classify_document("000.000.000-00", "cpf") is ErrorKind.INVALID_FORMAT
    assert classify_document("11.222.333/0001-82", "cnpj") is ErrorKind.CHECKSUM_FAILURE


def test_classify_document_unknown_kind():
    with pytest.raises(ValueError):
        classify_document("123", "rg")
