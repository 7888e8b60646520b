from __future__ import annotations

import logging

import requests
from flask import Blueprint, abort, jsonify, request

from cadastro.backend.services.connect_token import ConfigurationError, ConnectTokenService
from cadastro.backend.services.locations import LocationService
from cadastro.backend.services.registration import RegistrationService
from cadastro.backend.services.webhook import WebhookForwarder
from cadastro.common.errors import AddressLookupError, ErrorKind
from cadastro.sources.pluggy_client import PluggyError
from cadastro.validation.engine import SINGLE_VALUE_RULES, validate_value

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)
hooks_bp = Blueprint("hooks", __name__)

# Replaced in tests; built lazily so importing the module never reads the environment.
location_service: LocationService | None = None
connect_token_service: ConnectTokenService | None = None
registration_service: RegistrationService | None = None
webhook_forwarder: WebhookForwarder | None = None

LOOKUP_STATUS = {
    ErrorKind.INVALID_FORMAT: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.SERVICE_ERROR: 502,
    ErrorKind.NETWORK_ERROR: 503,
}


def _locations() -> LocationService:
    global location_service
    if location_service is None:
        location_service = LocationService()
    return location_service


def _connect_tokens() -> ConnectTokenService:
    global connect_token_service
    if connect_token_service is None:
        connect_token_service = ConnectTokenService()
    return connect_token_service


def _registrations() -> RegistrationService:
    global registration_service
    if registration_service is None:
        registration_service = RegistrationService()
    return registration_service


def _webhooks() -> WebhookForwarder:
    global webhook_forwarder
    if webhook_forwarder is None:
        webhook_forwarder = WebhookForwarder()
    return webhook_forwarder


def _lookup_abort(exc: AddressLookupError) -> None:
    abort(LOOKUP_STATUS.get(exc.kind, 502), description=str(exc))


@api_bp.get("/health")
def health_check():
    return jsonify({"status": "ok"})


@api_bp.route("/get-connect-token", methods=["GET", "POST"])
def get_connect_token():
    try:
        token = _connect_tokens().get_connect_token()
    except ConfigurationError as exc:
        return jsonify({"error": str(exc)}), 500
    except PluggyError as exc:
        return jsonify({"error": str(exc)}), exc.status_code
    except (requests.RequestException, KeyError, ValueError):
        logger.exception("Unexpected error while creating connect token")
        return jsonify({"error": "An internal server error occurred."}), 500
    return jsonify({"connectToken": token})


@api_bp.get("/cep/<cep>")
def cep_lookup(cep: str):
    try:
        record = _locations().lookup_cep(cep)
    except AddressLookupError as exc:
        _lookup_abort(exc)
    return jsonify(record.to_dict())


@api_bp.get("/localidades/estados")
def list_states():
    try:
        states = _locations().list_states()
    except AddressLookupError as exc:
        _lookup_abort(exc)
    return jsonify(states)


@api_bp.get("/localidades/estados/<uf>/municipios")
def list_cities(uf: str):
    try:
        cities = _locations().list_cities(uf)
    except AddressLookupError as exc:
        _lookup_abort(exc)
    return jsonify(cities)


@api_bp.post("/cadastro")
def register():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        abort(400, description="Corpo JSON com os campos do cadastro é obrigatório.")
    outcome = _registrations().register(payload)
    if not outcome.accepted:
        return jsonify({"status": "invalid", "errors": outcome.errors}), 422
    return jsonify({"status": "ok", "data": outcome.data}), 201


@api_bp.post("/validate/<kind>")
def validate(kind: str):
    if kind not in SINGLE_VALUE_RULES:
        abort(404, description=f"Regra desconhecida: {kind}")
    payload = request.get_json(silent=True) or {}
    value = payload.get("value")
    if not isinstance(value, str):
        abort(400, description="Campo 'value' é obrigatório.")
    result = validate_value(kind, value)
    return jsonify(
        {
            "valid": result.is_valid,
            "message": result.message,
            "error": result.error.value if result.error else None,
        },
    )


@hooks_bp.post("/webhook")
def webhook():
    _webhooks().forward(request.get_json(silent=True))
    return "Webhook received", 200
