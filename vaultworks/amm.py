"""An automated market maker that mints and burns a continuous token along a bonding curve."""

from __future__ import annotations

import logging
from decimal import Decimal

from vaultworks.curves import BondingCurve, RatioBondingCurve
from vaultworks.number import decimal_from_raw, decimal_to_raw
from vaultworks.resources import (
    DIVISIBILITY_MAXIMUM,
    Bucket,
    LedgerError,
    Proof,
    ResourceManager,
    ResourceType,
    Vault,
)

logger = logging.getLogger(__name__)

DEFAULT_RESERVE_RATIO_N = 1
DEFAULT_RESERVE_RATIO_D = 5
DEFAULT_PRECISION_BITS = 384


def _as_decimal(value) -> Decimal:
    return decimal_from_raw(decimal_to_raw(value))


def _check_minimum(minimum_to_receive) -> Decimal:
    minimum = _as_decimal(minimum_to_receive)
    if minimum < 0:
        raise ValueError("minimum to receive must not be negative")
    return minimum


class BondingAMM:
    """Buys and sells a continuous token against a reserve pool.

    The pricing comes from a pluggable bonding curve. Only this component
    mints or burns the continuous token.
    """

    def __init__(self, reserve: Vault, continuous: ResourceManager, bonding_curve: BondingCurve) -> None:
        self.reserve = reserve
        self.continuous = continuous
        self.bonding_curve = bonding_curve

    @classmethod
    def create(
        cls,
        initial_reserve: Bucket,
        continuous_name: str,
        continuous_symbol: str,
        bonding_curve: BondingCurve | None = None,
    ) -> tuple[BondingAMM, Bucket]:
        """Create the AMM, returning it with the initial supply of continuous token.

        Without a curve, a ratio curve of 1/5 at 384 bits of precision is used.
        """
        if initial_reserve.is_empty():
            raise LedgerError("initial reserve cannot be empty")
        if bonding_curve is None:
            bonding_curve = RatioBondingCurve(
                DEFAULT_RESERVE_RATIO_N, DEFAULT_RESERVE_RATIO_D, DEFAULT_PRECISION_BITS
            )
        initial_supply = bonding_curve.get_initial_supply(initial_reserve.amount)

        continuous = ResourceManager(
            ResourceType.FUNGIBLE,
            DIVISIBILITY_MAXIMUM,
            {"name": continuous_name, "symbol": continuous_symbol},
        )
        minted = continuous.mint(initial_supply)
        amm = cls(Vault.from_bucket(initial_reserve), continuous, bonding_curve)
        return amm, minted

    @classmethod
    def new_default(
        cls, initial_reserve: Bucket, continuous_name: str, continuous_symbol: str
    ) -> tuple[BondingAMM, Bucket]:
        """Create the AMM with the default ratio curve."""
        return cls.create(initial_reserve, continuous_name, continuous_symbol, None)

    def buy(self, collateral: Bucket, minimum_to_receive) -> tuple[Bucket, Bucket]:
        """Exchange reserve for newly minted continuous token.

        Returns (continuous, leftover reserve). If the amount minted would be
        zero or below `minimum_to_receive`, nothing is minted and the
        collateral comes back untouched.
        """
        minimum = _check_minimum(minimum_to_receive)
        if collateral.resource is not self.reserve.resource:
            raise LedgerError("collateral must be the reserve resource")
        logger.debug("buy with RESERVE amount: %s", collateral.amount)

        if collateral.is_empty():
            return Bucket(self.continuous), collateral

        mint_amount = self.get_buy_quote_amount(collateral.amount)
        logger.debug("will mint CONTINUOUS amount: %s", mint_amount)
        if mint_amount == 0 or mint_amount < minimum:
            return Bucket(self.continuous), collateral

        self.reserve.put(collateral)
        minted = self.continuous.mint(mint_amount)
        return minted, Bucket(self.reserve.resource)

    def sell(self, continuous: Bucket, minimum_to_receive) -> tuple[Bucket, Bucket]:
        """Burn continuous token in exchange for reserve.

        Returns (reserve, leftover continuous). If the return would be zero or
        below `minimum_to_receive`, nothing is burned and the continuous token
        comes back untouched.
        """
        minimum = _check_minimum(minimum_to_receive)
        if continuous.resource is not self.continuous:
            raise LedgerError("must sell the continuous resource")
        logger.debug("sell with CONTINUOUS amount: %s", continuous.amount)

        if continuous.is_empty():
            return Bucket(self.reserve.resource), continuous

        return_amount = self.get_sell_quote_amount(continuous.amount)
        logger.debug("will return RESERVE amount: %s", return_amount)
        if return_amount == 0 or return_amount < minimum:
            return Bucket(self.reserve.resource), continuous

        self.continuous.burn(continuous)
        return self.reserve.take(return_amount), Bucket(self.continuous)

    def get_price(self) -> Decimal:
        """Current price of the continuous token according to the curve."""
        return self.bonding_curve.get_price(self.reserve.amount, self.continuous.total_supply)

    def get_sell_quote(self, continuous_amount) -> Proof:
        """Prove the reserve holds what selling `continuous_amount` would return."""
        return_amount = self.get_sell_quote_amount(continuous_amount)
        held = self.reserve.take(return_amount)
        try:
            return held.create_proof()
        finally:
            self.reserve.put(held)

    def get_buy_quote_amount(self, collateral_amount) -> Decimal:
        """Continuous amount that buying with `collateral_amount` would mint."""
        return self.bonding_curve.get_mint_amount(
            collateral_amount, self.reserve.amount, self.continuous.total_supply
        )

    def get_sell_quote_amount(self, continuous_amount) -> Decimal:
        """Reserve amount that selling `continuous_amount` would return."""
        return self.bonding_curve.get_return_amount(
            continuous_amount, self.reserve.amount, self.continuous.total_supply
        )