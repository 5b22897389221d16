from __future__ import annotations

import dataclasses
import datetime as dt
import numbers
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Dict, List, Optional, Tuple, Type, TypeVar, Union

from networth_core.domain.errors import CurrencyMismatchError, InvalidArgumentError


AVAILABLE_TIMEFRAMES: Tuple[int, ...] = (1, 2, 3, 5, 10, 20)
DEFAULT_TIMEFRAMES: Tuple[int, ...] = (1, 5, 10)
DEFAULT_MINIMUM_MONTHS = 6
MAX_INVALID_RATIO = 0.3

# Currencies whose minor unit is not 1/100 of the major unit.
MINOR_UNIT_DIGITS: Dict[str, int] = {"JPY": 0, "KRW": 0, "CLP": 0, "ISK": 0, "KWD": 3, "BHD": 3}
CURRENCY_SYMBOLS: Dict[str, str] = {
    "USD": "$",
    "CAD": "C$",
    "AUD": "A$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "MXN": "MX$",
}

E = TypeVar("E", bound=Enum)


def _parse_choice(enum_cls: Type[E], value: Union[str, E], label: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        available = ", ".join(member.value for member in enum_cls)
        raise InvalidArgumentError(f"Invalid {label}: {value}. Available: {available}") from None


@dataclasses.dataclass(frozen=True)
class Money:
    """Signed amount in integer minor units (cents) tagged with a currency code."""

    cents: int
    currency: str = "USD"

    def __post_init__(self):
        if isinstance(self.cents, bool) or not isinstance(self.cents, numbers.Integral):
            raise TypeError(f"Money holds integer minor units, got {self.cents!r}")
        object.__setattr__(self, "cents", int(self.cents))
        object.__setattr__(self, "currency", self.currency.upper())

    @classmethod
    def zero(cls, currency: str = "USD") -> "Money":
        return cls(0, currency)

    @classmethod
    def from_decimal(cls, amount: Union[Decimal, str, int, float], currency: str = "USD") -> "Money":
        digits = MINOR_UNIT_DIGITS.get(currency.upper(), 2)
        minor = (Decimal(str(amount)).scaleb(digits)).quantize(Decimal(1), rounding=ROUND_HALF_UP)
        return cls(int(minor), currency)

    @property
    def minor_digits(self) -> int:
        return MINOR_UNIT_DIGITS.get(self.currency, 2)

    @property
    def minor_per_major(self) -> int:
        return 10 ** self.minor_digits

    def to_decimal(self) -> Decimal:
        return Decimal(self.cents).scaleb(-self.minor_digits)

    def _check(self, other: "Money") -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Expected Money, got {type(other).__name__}")
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency, other.currency)

    def add(self, other: "Money") -> "Money":
        self._check(other)
        return Money(self.cents + other.cents, self.currency)

    def __add__(self, other: "Money") -> "Money":
        return self.add(other)

    def __sub__(self, other: "Money") -> "Money":
        self._check(other)
        return Money(self.cents - other.cents, self.currency)

    def __neg__(self) -> "Money":
        return Money(-self.cents, self.currency)

    def __abs__(self) -> "Money":
        return Money(abs(self.cents), self.currency)

    def __mul__(self, factor: int) -> "Money":
        if isinstance(factor, bool) or not isinstance(factor, numbers.Integral):
            raise TypeError("Use Money.scale() for non-integer multipliers")
        return Money(self.cents * int(factor), self.currency)

    __rmul__ = __mul__

    def scale(self, multiplier: Union[Decimal, float, int, str]) -> "Money":
        """Multiply by a rational factor, rounding halves away from zero."""
        scaled = Decimal(self.cents) * Decimal(str(multiplier))
        return Money(int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP)), self.currency)

    def __lt__(self, other: "Money") -> bool:
        self._check(other)
        return self.cents < other.cents

    def __le__(self, other: "Money") -> bool:
        self._check(other)
        return self.cents <= other.cents

    def __gt__(self, other: "Money") -> bool:
        self._check(other)
        return self.cents > other.cents

    def __ge__(self, other: "Money") -> bool:
        self._check(other)
        return self.cents >= other.cents

    def is_zero(self) -> bool:
        return self.cents == 0

    def is_negative(self) -> bool:
        return self.cents < 0

    def is_positive(self) -> bool:
        return self.cents > 0

    def format(self) -> str:
        symbol = CURRENCY_SYMBOLS.get(self.currency, f"{self.currency} ")
        sign = "-" if self.cents < 0 else ""
        return f"{sign}{symbol}{abs(self.to_decimal()):,.{self.minor_digits}f}"

    def __str__(self) -> str:
        return str(self.to_decimal())


class CalculationMethod(str, Enum):
    MEAN = "mean"
    MEDIAN = "median"
    WEIGHTED = "weighted"

    @classmethod
    def parse(cls, value: Union[str, "CalculationMethod"]) -> "CalculationMethod":
        return _parse_choice(cls, value, "method")


class Interval(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @property
    def months(self) -> int:
        return {"monthly": 1, "quarterly": 3, "yearly": 12}[self.value]

    @classmethod
    def parse(cls, value: Union[str, "Interval"]) -> "Interval":
        return _parse_choice(cls, value, "interval")


class Volatility(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class GrowthError(str, Enum):
    INSUFFICIENT_HISTORY = "insufficient_history"
    POOR_DATA_QUALITY = "poor_data_quality"


class Scenario(Enum):
    CONSERVATIVE = ("conservative", Decimal("0.70"))
    REALISTIC = ("realistic", Decimal("1.00"))
    OPTIMISTIC = ("optimistic", Decimal("1.30"))

    def __init__(self, label: str, multiplier: Decimal):
        self.label = label
        self.multiplier = multiplier

    @classmethod
    def from_label(cls, label: str) -> "Scenario":
        for scenario in cls:
            if scenario.label == label:
                return scenario
        available = ", ".join(s.label for s in cls)
        raise InvalidArgumentError(f"Invalid scenario: {label}. Available: {available}")


@dataclasses.dataclass(frozen=True)
class Account:
    id: str
    name: str
    classification: str  # "asset" or "liability"
    currency: str = "USD"
    visible: bool = True


@dataclasses.dataclass(frozen=True)
class HistoricalPoint:
    date: dt.date
    value: Optional[Money]

    @property
    def is_missing(self) -> bool:
        return self.value is None or self.value.is_zero()


@dataclasses.dataclass(frozen=True)
class HistoricalPeriod:
    start: Optional[dt.date] = None
    end: Optional[dt.date] = None


@dataclasses.dataclass(frozen=True)
class GrowthResult:
    sufficient: bool
    monthly_rate: Money
    monthly_rate_percent: float = 0.0
    volatility: Volatility = Volatility.LOW
    warning: Optional[str] = None
    data_points_used: int = 0
    calculation_method: Optional[CalculationMethod] = None
    period: HistoricalPeriod = dataclasses.field(default_factory=HistoricalPeriod)
    error: Optional[GrowthError] = None
    message: Optional[str] = None
    data_points_found: Optional[int] = None
    data_points_required: Optional[int] = None
    invalid_count: Optional[int] = None
    total_count: Optional[int] = None


@dataclasses.dataclass(frozen=True)
class DataQuality:
    sufficient: bool
    volatility: Optional[Volatility] = None
    warning: Optional[str] = None
    data_points_used: int = 0
    period: HistoricalPeriod = dataclasses.field(default_factory=HistoricalPeriod)
    error: Optional[GrowthError] = None
    message: Optional[str] = None
    data_points_found: Optional[int] = None
    data_points_required: Optional[int] = None
    invalid_count: Optional[int] = None
    total_count: Optional[int] = None

    @classmethod
    def from_growth(cls, growth: GrowthResult) -> "DataQuality":
        if not growth.sufficient:
            return cls(
                sufficient=False,
                error=growth.error,
                message=growth.message,
                data_points_found=growth.data_points_found,
                data_points_required=growth.data_points_required,
                invalid_count=growth.invalid_count,
                total_count=growth.total_count,
            )
        return cls(
            sufficient=True,
            volatility=growth.volatility,
            warning=growth.warning,
            data_points_used=growth.data_points_used,
            period=growth.period,
        )


@dataclasses.dataclass(frozen=True)
class ProjectionPoint:
    date: dt.date
    value: Money
    months_from_now: int


@dataclasses.dataclass(frozen=True)
class Milestone:
    date: dt.date
    value: Money
    growth_from_current: Money


@dataclasses.dataclass
class ScenarioProjection:
    values: List[ProjectionPoint]
    milestones: Dict[int, Milestone]
    final_value: Money
    total_growth: Money
    years_projected: int


@dataclasses.dataclass(frozen=True)
class GrowthRateSummary:
    monthly: Money
    annual: Money
    percent: float

    @classmethod
    def from_monthly(cls, monthly: Money, percent: float) -> "GrowthRateSummary":
        return cls(monthly=monthly, annual=monthly * 12, percent=percent)


@dataclasses.dataclass
class ProjectionDocument:
    current_net_worth: Money
    data_quality: DataQuality
    timeframes: List[int]
    interval: Interval = Interval.MONTHLY
    growth_rate: Optional[GrowthRateSummary] = None
    scenarios: Dict[Scenario, ScenarioProjection] = dataclasses.field(default_factory=dict)
    error: Optional[GrowthError] = None
    message: Optional[str] = None

    @property
    def sufficient(self) -> bool:
        return self.data_quality.sufficient


@dataclasses.dataclass(frozen=True)
class ProjectionConfig:
    minimum_months: int = DEFAULT_MINIMUM_MONTHS
    timeframes: Tuple[int, ...] = DEFAULT_TIMEFRAMES
    interval: Interval = Interval.MONTHLY
    method: CalculationMethod = CalculationMethod.MEAN
    base_currency: str = "USD"
    max_invalid_ratio: float = MAX_INVALID_RATIO
