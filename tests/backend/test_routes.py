import pytest

from cadastro.backend.app import create_app
from cadastro.backend.services.connect_token import ConnectTokenService
from cadastro.backend.services.locations import LocationService
from cadastro.backend.services.registration import RegistrationService
from cadastro.common.errors import NetworkError, NotFoundError, ServiceError
from cadastro.common.settings import Settings
from cadastro.sources.address_lookup import AddressRecord
from cadastro.sources.pluggy_client import PluggyAuthError, PluggyTokenError


class StubLocations:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def lookup_cep(self, cep):
        self.calls.append(cep)
        if self.error is not None:
            raise self.error
        return AddressRecord("01310100", "Avenida Paulista", "Bela Vista", "São Paulo", "SP")

    def list_states(self):
        return [{"sigla": "AC", "nome": "Acre"}]

    def list_cities(self, uf):
        if self.error is not None:
            raise self.error
        return [{"nome": "Campinas"}]


class StubTokens:
    def __init__(self, token=None, error=None):
        self.token = token
        self.error = error

    def get_connect_token(self):
        if self.error is not None:
            raise self.error
        return self.token


@pytest.fixture
def api_routes(monkeypatch, today):
    from cadastro.backend.routes import api as api_routes

    monkeypatch.setattr(api_routes, "location_service", StubLocations())
    monkeypatch.setattr(api_routes, "connect_token_service", StubTokens("token-1"))
    monkeypatch.setattr(api_routes, "registration_service", RegistrationService(Settings(), today=today))
    return api_routes


@pytest.fixture
def client(api_routes):
    app = create_app()
    app.config.update({"TESTING": True})
    with app.test_client() as client:
        yield client


def test_health_endpoint(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


@pytest.mark.parametrize("method", ["get", "post"])
def test_connect_token_success(client, method):
    response = getattr(client, method)("/api/get-connect-token")
    assert response.status_code == 200
    assert response.get_json() == {"connectToken": "token-1"}


def test_connect_token_without_credentials(client, monkeypatch, api_routes):
    monkeypatch.setattr(api_routes, "connect_token_service", ConnectTokenService(Settings()))
    response = client.get("/api/get-connect-token")
    assert response.status_code == 500
    assert response.get_json() == {"error": "Server configuration error."}


@pytest.mark.parametrize(
    "error, status, message",
    [
        (PluggyAuthError("Failed to authenticate with service provider.", status_code=401), 401, "Failed to authenticate with service provider."),
        (PluggyTokenError("Failed to create connect token.", status_code=403), 403, "Failed to create connect token."),
        (KeyError("apiKey"), 500, "An internal server error occurred."),
    ],
)
def test_connect_token_failures(client, monkeypatch, api_routes, error, status, message):
    monkeypatch.setattr(api_routes, "connect_token_service", StubTokens(error=error))
    response = client.get("/api/get-connect-token")
    assert response.status_code == status
    assert response.get_json() == {"error": message}


def test_cep_lookup(client):
    response = client.get("/api/cep/01310-100")
    assert response.status_code == 200
    assert response.get_json()["street"] == "Avenida Paulista"


@pytest.mark.parametrize(
    "error, status",
    [
        (NotFoundError("CEP não encontrado"), 404),
        (ServiceError("ViaCEP fora"), 502),
        (NetworkError("sem rede"), 503),
    ],
)
def test_cep_lookup_errors(client, monkeypatch, api_routes, error, status):
    monkeypatch.setattr(api_routes, "location_service", StubLocations(error=error))
    response = client.get("/api/cep/01310100")
    assert response.status_code == status


def test_cep_lookup_invalid_format_uses_real_service(client, monkeypatch, api_routes):
    monkeypatch.setattr(api_routes, "location_service", LocationService(Settings()))
    response = client.get("/api/cep/123")
    assert response.status_code == 400


def test_states_and_cities(client):
    assert client.get("/api/localidades/estados").get_json() == [{"sigla": "AC", "nome": "Acre"}]
    assert client.get("/api/localidades/estados/SP/municipios").get_json() == [{"nome": "Campinas"}]


VALID = {
    "nome_completo": "Maria da Silva",
    "cpf": "111.444.777-35",
    "data_nascimento": "15/06/1990",
    "sexo": "Feminino",
    "nacionalidade": "Brasileira",
    "nome_mae": "Ana da Silva",
    "email": "maria@example.com",
    "confirmacao_email": "maria@example.com",
    "telefone": "(11) 98765-4321",
    "estado_civil": "Solteiro(a)",
    "tipo_documento": "CNH",
    "numero_documento": "12345678901",
    "data_expedicao": "10/01/2010",
    "orgao_emissor": "DETRAN",
    "cep": "01310-100",
    "logradouro": "Avenida Paulista",
    "numero": "1000",
    "bairro": "Bela Vista",
    "cidade": "São Paulo",
    "estado": "SP",
    "mesmo_endereco": "on",
    "renda_mensal": "R$ 10.000,00",
    "valor_investimento_inicial": "R$ 50.000,00",
    "perfil_risco": "Arrojado",
}


def test_register_valid_payload(client):
    response = client.post("/api/cadastro", json=VALID)
    assert response.status_code == 201
    data = response.get_json()["data"]
    assert data["cpf"] == "11144477735"
    assert data["corresp_cep"] == "01310100"


def test_register_invalid_payload(client):
    response = client.post("/api/cadastro", json={**VALID, "cpf": "111.444.777-36", "email": ""})
    assert response.status_code == 422
    errors = response.get_json()["errors"]
    assert errors["cpf"] == "CPF inválido"
    assert errors["email"] == "Este campo é obrigatório"


def test_register_requires_json_object(client):
    response = client.post("/api/cadastro", data="nada", content_type="text/plain")
    assert response.status_code == 400


def test_validate_single_value(client):
    response = client.post("/api/validate/cpf", json={"value": "111.444.777-35"})
    assert response.get_json() == {"valid": True, "message": None, "error": None}

    response = client.post("/api/validate/cpf", json={"value": "111.444.777-36"})
    assert response.get_json() == {"valid": False, "message": "CPF inválido", "error": "ChecksumFailure"}


def test_validate_unknown_kind_and_missing_value(client):
    assert client.post("/api/validate/luhn", json={"value": "1"}).status_code == 404
    assert client.post("/api/validate/cpf", json={}).status_code == 400


def test_metrics_endpoint(client):
    client.get("/api/cep/01310100")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert b"registrations_total" in response.data
