from __future__ import annotations


class InvalidArgumentError(ValueError):
    """Caller passed a timeframe, interval, method or scenario we do not support."""


class CurrencyMismatchError(ValueError):
    def __init__(self, left: str, right: str):
        super().__init__(f"Currency mismatch: {left} vs {right}")
        self.left = left
        self.right = right


class ConversionError(LookupError):
    def __init__(self, source: str, target: str):
        super().__init__(f"No exchange rate from {source} to {target}")
        self.source = source
        self.target = target
