"""Prometheus metrics for the backend."""

from prometheus_client import Counter

address_lookups = Counter(
    "address_lookups_total",
    "Consultas de CEP por resultado",
    ["outcome"],
)

connect_token_requests = Counter(
    "connect_token_requests_total",
    "Solicitações de connect token por resultado",
    ["outcome"],
)

webhook_forwards = Counter(
    "webhook_forwards_total",
    "Encaminhamentos de webhook por resultado",
    ["outcome"],
)

registrations = Counter(
    "registrations_total",
    "Cadastros recebidos por resultado",
    ["outcome"],
)
