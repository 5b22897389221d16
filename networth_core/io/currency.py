from __future__ import annotations

from decimal import Decimal
from typing import Dict, Mapping, Optional, Protocol, Tuple, Union

from networth_core.domain.errors import ConversionError
from networth_core.domain.models import Money


class CurrencyConverter(Protocol):
    def convert(self, money: Money, to_currency: str) -> Money:
        ...


class StaticRateConverter:
    """
    Converts with a fixed rate table keyed by (source, target).
    Inverse pairs are derived when only one direction is given.
    """

    def __init__(self, rates: Optional[Mapping[Tuple[str, str], Union[Decimal, float, str]]] = None):
        self._rates: Dict[Tuple[str, str], Decimal] = {}
        for (source, target), rate in (rates or {}).items():
            self._rates[(source.upper(), target.upper())] = Decimal(str(rate))

    @classmethod
    def from_pairs(cls, rates: Mapping[str, Union[Decimal, float, str]]) -> "StaticRateConverter":
        """Build from keys written as "EUR/USD"."""
        table = {}
        for pair, rate in rates.items():
            source, sep, target = pair.partition("/")
            if not sep or not source or not target:
                raise ValueError(f"Exchange rate key must look like 'EUR/USD', got {pair!r}")
            table[(source.strip(), target.strip())] = rate
        return cls(table)

    def rate(self, source: str, target: str) -> Decimal:
        source, target = source.upper(), target.upper()
        if source == target:
            return Decimal(1)
        if (source, target) in self._rates:
            return self._rates[(source, target)]
        if (target, source) in self._rates:
            return Decimal(1) / self._rates[(target, source)]
        raise ConversionError(source, target)

    def convert(self, money: Money, to_currency: str) -> Money:
        to_currency = to_currency.upper()
        if money.currency == to_currency:
            return money
        major = money.to_decimal() * self.rate(money.currency, to_currency)
        return Money.from_decimal(major, to_currency)
