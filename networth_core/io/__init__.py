from networth_core.io.balances import BalanceSource, InMemoryBalanceSource, load_balances  # noqa: F401
from networth_core.io.config import load_projection_config, projection_config_from_dict  # noqa: F401
from networth_core.io.currency import CurrencyConverter, StaticRateConverter  # noqa: F401
from networth_core.io.serialize import document_from_json, document_to_json, error_payload  # noqa: F401

__all__ = [
    "BalanceSource",
    "CurrencyConverter",
    "InMemoryBalanceSource",
    "StaticRateConverter",
    "document_from_json",
    "document_to_json",
    "error_payload",
    "load_balances",
    "load_projection_config",
    "projection_config_from_dict",
]
