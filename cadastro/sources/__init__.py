"""Remote data sources used by the registration form and backend."""

from .address_lookup import AddressLookup, AddressRecord, normalize_cep
from .ibge_client import BRAZILIAN_STATES, IBGEClient, IBGEClientConfig
from .pluggy_client import PluggyClient, PluggyClientConfig, PluggyError
from .viacep_client import ViaCEPClient, ViaCEPClientConfig

__all__ = (
    "AddressLookup",
    "AddressRecord",
    "normalize_cep",
    "BRAZILIAN_STATES",
    "IBGEClient",
    "IBGEClientConfig",
    "PluggyClient",
    "PluggyClientConfig",
    "PluggyError",
    "ViaCEPClient",
    "ViaCEPClientConfig",
)
