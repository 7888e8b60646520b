import pytest

from cadastro.common.errors import InvalidFormatError, ServiceError
from cadastro.sources.ibge_client import BRAZILIAN_STATES, IBGEClient, IBGEClientConfig


class DummyResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        return self._payload


class DummySession:
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append(url)
        return self.responses.pop(0)


def test_list_states_sorted_by_name():
    session = DummySession([DummyResponse([{"sigla": "SP", "nome": "São Paulo"}, {"sigla": "AC", "nome": "Acre"}])])
    client = IBGEClient(IBGEClientConfig(base_url="http://ibge.local"), session=session)

    states = client.list_states()

    assert [state["sigla"] for state in states] == ["AC", "SP"]
    assert session.calls == ["http://ibge.local/api/v1/localidades/estados"]


def test_list_cities_cached_per_uf():
    session = DummySession([DummyResponse([{"nome": "Santos"}, {"nome": "Campinas"}])])
    client = IBGEClient(session=session)

    first = client.list_cities("sp")
    second = client.list_cities("SP")

    assert [city["nome"] for city in first] == ["Campinas", "Santos"]
    assert first is second
    assert len(session.calls) == 1
    assert session.calls[0].endswith("/estados/SP/municipios")


def test_unknown_uf_is_rejected_without_request():
    session = DummySession([])
    with pytest.raises(InvalidFormatError):
        IBGEClient(session=session).list_cities("XX")
    assert session.calls == []


def test_non_list_payload_is_service_error():
    session = DummySession([DummyResponse({"erro": True})])
    with pytest.raises(ServiceError):
        IBGEClient(session=session).list_states()


def test_http_error_is_service_error():
    session = DummySession([DummyResponse([], status_code=503)])
    with pytest.raises(ServiceError) as excinfo:
        IBGEClient(session=session).list_states()
    assert excinfo.value.status_code == 503


def test_all_states_known():
    assert len(BRAZILIAN_STATES) == 27
    assert BRAZILIAN_STATES["DF"] == "Distrito Federal"
