"""FX rate resolution over a static ordered-pair rate table."""

import logging
from collections.abc import Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal
from itertools import permutations

from treasury_sim.exceptions import ConfigurationError, FXRateNotFoundError
from treasury_sim.models import Currency

logger = logging.getLogger(__name__)

ONE = Decimal("1")
CENT = Decimal("0.01")

RateTable = Mapping[tuple[Currency, Currency], Decimal]


def round_money(value: Decimal) -> Decimal:
    """Round a monetary value half-up to two decimal places."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class FXConverter:
    """Resolve exchange rates between supported currencies.

    Resolution order for ``rate(a, b)``:

    1. ``a == b`` gives exactly 1.
    2. A directly configured ``(a, b)`` rate.
    3. The reciprocal of a configured ``(b, a)`` rate.
    4. A cross rate through the anchor currency, ``leg(a, anchor) *
       leg(anchor, b)``, each leg resolved by steps 2-3.

    When nothing resolves, the default policy logs a warning and returns 1.
    With ``strict=True`` an ``FXRateNotFoundError`` is raised instead.

    Parameters
    ----------
    rates : Mapping[tuple[Currency, Currency], Decimal]
        Configured rates keyed by ordered currency pair.
    anchor : Currency
        Reference currency used for cross rates.
    strict : bool
        Raise instead of falling back to a neutral rate.
    """

    def __init__(
        self,
        rates: RateTable,
        anchor: Currency = Currency.USD,
        strict: bool = False,
    ) -> None:
        self._rates: dict[tuple[Currency, Currency], Decimal] = {}
        for (source, target), value in rates.items():
            rate = Decimal(str(value))
            if rate <= 0:
                raise ConfigurationError(f"FX rate {source}-{target} must be positive")
            self._rates[(Currency(source), Currency(target))] = rate
        self.anchor = Currency(anchor)
        self.strict = strict

    @classmethod
    def from_config(cls, config) -> "FXConverter":
        """Build a converter from an ``FXConfig``."""
        return cls(config.rates, anchor=config.anchor_currency, strict=config.strict)

    @property
    def rates(self) -> dict[tuple[Currency, Currency], Decimal]:
        return dict(self._rates)

    def rate(self, from_currency: Currency, to_currency: Currency) -> Decimal:
        """Resolve the rate converting one unit of ``from_currency``."""
        from_currency = Currency(from_currency)
        to_currency = Currency(to_currency)

        resolved = self._resolve(from_currency, to_currency)
        if resolved is not None:
            return resolved

        if self.strict:
            raise FXRateNotFoundError(
                f"No FX rate found for {from_currency.value} to {to_currency.value}"
            )
        logger.warning(
            "No FX rate found for %s to %s, using neutral rate 1",
            from_currency.value,
            to_currency.value,
        )
        return ONE

    def convert(
        self, amount: Decimal, from_currency: Currency, to_currency: Currency
    ) -> Decimal:
        """Convert an amount and round the result to cents."""
        return round_money(amount * self.rate(from_currency, to_currency))

    def has_rate(self, from_currency: Currency, to_currency: Currency) -> bool:
        """Whether a pair resolves without the neutral fallback."""
        return self._resolve(Currency(from_currency), Currency(to_currency)) is not None

    def missing_pairs(
        self, currencies: Iterable[Currency] = tuple(Currency)
    ) -> list[tuple[Currency, Currency]]:
        """Ordered pairs among ``currencies`` that no resolution path covers."""
        return [
            (a, b) for a, b in permutations(currencies, 2) if not self.has_rate(a, b)
        ]

    def check_coverage(self, currencies: Iterable[Currency] = tuple(Currency)) -> None:
        """Raise ``ConfigurationError`` if any pair among ``currencies`` is unresolved."""
        missing = self.missing_pairs(currencies)
        if missing:
            pairs = ", ".join(f"{a.value}-{b.value}" for a, b in missing)
            raise ConfigurationError(f"FX rate table does not cover: {pairs}")

    def _resolve(self, from_currency: Currency, to_currency: Currency) -> Decimal | None:
        if from_currency == to_currency:
            return ONE

        direct = self._leg(from_currency, to_currency)
        if direct is not None:
            return direct

        if self.anchor in (from_currency, to_currency):
            return None

        to_anchor = self._leg(from_currency, self.anchor)
        from_anchor = self._leg(self.anchor, to_currency)
        if to_anchor is not None and from_anchor is not None:
            return to_anchor * from_anchor
        return None

    def _leg(self, from_currency: Currency, to_currency: Currency) -> Decimal | None:
        direct = self._rates.get((from_currency, to_currency))
        if direct is not None:
            return direct
        inverse = self._rates.get((to_currency, from_currency))
        if inverse is not None:
            return ONE / inverse
        return None
