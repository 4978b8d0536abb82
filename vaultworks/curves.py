"""Bonding curves: the maths that prices minting and burning of a continuous token."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from decimal import Decimal

from vaultworks.number import (
    decimal_from_number,
    decimal_from_raw,
    decimal_to_raw,
    number_from_decimal,
    scaled_power,
)

logger = logging.getLogger(__name__)


def _as_decimal(value) -> Decimal:
    return decimal_from_raw(decimal_to_raw(value))


def _truncating_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return -quotient if (numerator < 0) != (denominator < 0) else quotient


class BondingCurve(ABC):
    """Interface every bonding curve provides."""

    @abstractmethod
    def get_mint_amount(self, collateral_amount, reserve_amount, supply_amount) -> Decimal:
        """Amount of continuous token minted for the given collateral."""

    @abstractmethod
    def get_return_amount(self, continuous_amount, reserve_amount, supply_amount) -> Decimal:
        """Amount of reserve returned for burning the given continuous amount."""

    @abstractmethod
    def get_initial_supply(self, collateral_amount) -> Decimal:
        """Continuous supply minted for the initial reserve."""

    @abstractmethod
    def get_price(self, reserve_amount, supply_amount) -> Decimal:
        """Current price of one continuous token in reserve."""


class BasicBondingCurve(BondingCurve):
    """A flat one-to-one curve."""

    def get_mint_amount(self, collateral_amount, reserve_amount, supply_amount) -> Decimal:
        return _as_decimal(collateral_amount)

    def get_return_amount(self, continuous_amount, reserve_amount, supply_amount) -> Decimal:
        return _as_decimal(continuous_amount)

    def get_initial_supply(self, collateral_amount) -> Decimal:
        return _as_decimal(collateral_amount)

    def get_price(self, reserve_amount, supply_amount) -> Decimal:
        return _as_decimal(1)

    def get_sale_quote(self, continuous_amount, reserve_amount, supply_amount) -> Decimal:
        return _as_decimal(continuous_amount)

    def get_buy_quote(self, collateral_amount, reserve_amount, supply_amount) -> Decimal:
        return _as_decimal(collateral_amount)


def calculate_price(r: int, s: int, reserve_ratio_n: int, reserve_ratio_d: int) -> int:
    """Reserve balance / (continuous supply * reserve ratio)."""
    n = number_from_decimal(reserve_ratio_n, 0)
    d = number_from_decimal(reserve_ratio_d, 0)
    return _truncating_div(_truncating_div(r, s), n) * d


def calculate_initial_supply(collateral_amount: int, reserve_ratio_n: int, reserve_ratio_d: int) -> int:
    """collateral * reserve_ratio_d / reserve_ratio_n."""
    return scaled_power(
        collateral_amount,
        number_from_decimal(reserve_ratio_d, 0),
        number_from_decimal(reserve_ratio_n, 0),
        1,
        1,
    )


def calculate_curve_mint(c: int, r: int, s: int, reserve_ratio_n: int, reserve_ratio_d: int) -> int:
    """s * ((1 + c / r) ** ratio - 1)."""
    return scaled_power(s, c + r, r, reserve_ratio_n, reserve_ratio_d) - s


def calculate_curve_return(c: int, r: int, s: int, reserve_ratio_n: int, reserve_ratio_d: int) -> int:
    """r * (1 - (1 - c / s) ** (1 / ratio))."""
    return r - scaled_power(r, s - c, s, reserve_ratio_d, reserve_ratio_n)


def _check_inputs(amounts, reserve_ratio_d: int) -> None:
    if any(amount < 0 for amount in amounts):
        raise ValueError("amounts must not be negative")
    if reserve_ratio_d == 0:
        raise ValueError("reserve ratio denominator cannot be zero")


def get_initial_supply(collateral_amount, reserve_ratio_n: int, reserve_ratio_d: int, precision_bits: int) -> Decimal:
    """Continuous supply minted for an initial reserve of `collateral_amount`."""
    collateral = _as_decimal(collateral_amount)
    _check_inputs([collateral], reserve_ratio_d)
    if collateral == 0:
        return _as_decimal(0)
    result = calculate_initial_supply(
        number_from_decimal(collateral, precision_bits), reserve_ratio_n, reserve_ratio_d
    )
    return decimal_from_number(result, precision_bits)


def get_mint_amount(
    collateral_amount,
    reserve_amount,
    supply_amount,
    reserve_ratio_n: int,
    reserve_ratio_d: int,
    precision_bits: int,
) -> Decimal:
    """Continuous amount minted when buying with `collateral_amount` of reserve."""
    amounts = [_as_decimal(a) for a in (collateral_amount, reserve_amount, supply_amount)]
    _check_inputs(amounts, reserve_ratio_d)
    if amounts[0] == 0:
        return _as_decimal(0)
    c, r, s = (number_from_decimal(a, precision_bits) for a in amounts)
    result = calculate_curve_mint(c, r, s, reserve_ratio_n, reserve_ratio_d)
    if result < 0:
        raise ValueError("Calculated negative mint amount")
    return decimal_from_number(result, precision_bits)


def get_return_amount(
    continuous_amount,
    reserve_amount,
    supply_amount,
    reserve_ratio_n: int,
    reserve_ratio_d: int,
    precision_bits: int,
) -> Decimal:
    """Reserve amount returned when selling `continuous_amount`."""
    amounts = [_as_decimal(a) for a in (continuous_amount, reserve_amount, supply_amount)]
    _check_inputs(amounts, reserve_ratio_d)
    if amounts[0] == 0:
        return _as_decimal(0)
    c, r, s = (number_from_decimal(a, precision_bits) for a in amounts)
    result = calculate_curve_return(c, r, s, reserve_ratio_n, reserve_ratio_d)
    if result < 0:
        raise ValueError("Calculated negative return amount")
    return decimal_from_number(result, precision_bits)


class RatioBondingCurve(BondingCurve):
    """A curve parametrised by its reserve ratio reserve_ratio_n / reserve_ratio_d."""

    def __init__(self, reserve_ratio_n: int, reserve_ratio_d: int, precision_bits: int) -> None:
        logger.debug(
            "RatioBondingCurve created with %s / %s @ %s bits",
            reserve_ratio_n,
            reserve_ratio_d,
            precision_bits,
        )
        if reserve_ratio_d == 0:
            raise ValueError("reserve ratio denominator cannot be zero")
        self.reserve_ratio_n = reserve_ratio_n
        self.reserve_ratio_d = 1 if reserve_ratio_n == 0 else reserve_ratio_d
        self.precision_bits = precision_bits

    def __repr__(self) -> str:
        return (
            f"RatioBondingCurve({self.reserve_ratio_n}, {self.reserve_ratio_d}, "
            f"{self.precision_bits})"
        )

    def get_initial_supply(self, collateral_amount) -> Decimal:
        return get_initial_supply(
            collateral_amount, self.reserve_ratio_n, self.reserve_ratio_d, self.precision_bits
        )

    def get_mint_amount(self, collateral_amount, reserve_amount, supply_amount) -> Decimal:
        logger.debug(
            "get_mint_amount collateral=%s reserve=%s supply=%s",
            collateral_amount,
            reserve_amount,
            supply_amount,
        )
        return get_mint_amount(
            collateral_amount,
            reserve_amount,
            supply_amount,
            self.reserve_ratio_n,
            self.reserve_ratio_d,
            self.precision_bits,
        )

    def get_return_amount(self, continuous_amount, reserve_amount, supply_amount) -> Decimal:
        logger.debug(
            "get_return_amount continuous=%s reserve=%s supply=%s",
            continuous_amount,
            reserve_amount,
            supply_amount,
        )
        return get_return_amount(
            continuous_amount,
            reserve_amount,
            supply_amount,
            self.reserve_ratio_n,
            self.reserve_ratio_d,
            self.precision_bits,
        )

    def get_price(self, reserve_amount, supply_amount) -> Decimal:
        r = number_from_decimal(reserve_amount, self.precision_bits)
        s = number_from_decimal(supply_amount, self.precision_bits)
        price = calculate_price(r, s, self.reserve_ratio_n, self.reserve_ratio_d)
        return decimal_from_number(price, self.precision_bits)