from datetime import date

import pytest

from cadastro.validation import formats

TODAY = date(2024, 6, 15)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("29/02/2024", True),
        ("29/02/2023", False),
        ("31/04/2024", False),
        ("29/02/2000", True),
        ("29/02/1900", False),
        ("15/13/2020", False),
        ("1/1/2020", False),
        ("", True),
    ],
)
def test_is_valid_date(value, expected):
    assert formats.is_valid_date(value) is expected


def test_leap_years():
    assert formats.is_leap_year(2024)
    assert formats.is_leap_year(2000)
    assert not formats.is_leap_year(1900)
    assert not formats.is_leap_year(2023)


def test_adult_exactly_eighteen_years_ago():
    assert formats.is_adult("15/06/2006", today=TODAY)


def test_one_day_short_of_eighteen_is_not_adult():
    assert not formats.is_adult("16/06/2006", today=TODAY)


def test_adult_requires_a_real_date():
    assert not formats.is_adult("31/02/2000", today=TODAY)


def test_issuance_date_cannot_be_in_the_future():
    assert formats.is_valid_issuance_date("15/06/2024", today=TODAY)
    assert not formats.is_valid_issuance_date("16/06/2024", today=TODAY)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("ana@example.com", True),
        ("ana.souza+invest@mail.com.br", True),
        ("ana@", False),
        ("ana@example", False),
        ("", True),
    ],
)
def test_is_valid_email(value, expected):
    assert formats.is_valid_email(value) is expected


def test_phone_accepts_landline_and_mobile():
    assert formats.is_valid_phone("(11) 3456-7890")
    assert formats.is_valid_phone("(11) 98765-4321")
    assert not formats.is_valid_phone("(11) 9876")


def test_cep_with_and_without_hyphen():
    assert formats.is_valid_cep("01310-100")
    assert formats.is_valid_cep("01310100")
    assert not formats.is_valid_cep("0131-0100")


@pytest.mark.parametrize(
    "value, doc_type, expected",
    [
        ("12.345.678-9", "RG", True),
        ("1234567", "RG", False),
        ("12345678901", "CNH", True),
        ("1234567890", "CNH", False),
        ("AB123456", "Passaporte", True),
        ("ab123456", "Passaporte", True),
        ("A1234567", "Passaporte", False),
        ("qualquer", None, True),
    ],
)
def test_document_number_by_type(value, doc_type, expected):
    assert formats.is_valid_document_number(value, doc_type) is expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Maria da Silva", True),
        ("João D'Ávila", True),
        ("Ana-Clara Souza", True),
        ("Maria2", False),
        ("Maria  Silva", False),
        (" Maria", False),
        ("Maria--Silva", False),
        ("Maria@Silva", False),
    ],
)
def test_is_valid_name(value, expected):
    assert formats.is_valid_name(value) is expected
