"""Donations paid in XRD in exchange for badges, with a fee kept by the component."""

from __future__ import annotations

import logging
from decimal import Decimal

from vaultworks.number import DECIMAL_PLACES, decimal_from_raw, decimal_to_raw
from vaultworks.resources import (
    DIVISIBILITY_NONE,
    Account,
    Bucket,
    LedgerError,
    ResourceManager,
    ResourceType,
    Vault,
)

logger = logging.getLogger(__name__)

_ONE = 10**DECIMAL_PLACES


def _truncating_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return -quotient if (numerator < 0) != (denominator < 0) else quotient


def _format_decimal(value: Decimal) -> str:
    text = format(value.normalize(), "f")
    return "0" if text in ("-0", "0") else text


class Donations:
    """Sells owners' badges for XRD, forwarding the price minus a percentage fee."""

    def __init__(self, xrd: ResourceManager, admin_badge: ResourceManager, admin_vault: Vault, fee) -> None:
        self.xrd = xrd
        self.admin_badge = admin_badge
        self._admin_vault = admin_vault
        self.fee = decimal_from_raw(decimal_to_raw(fee))
        self.collected_fees = Vault(xrd)
        self.badges: dict[Account, list[Vault]] = {}

    @classmethod
    def new(cls, xrd: ResourceManager, fee_percent) -> tuple[Donations, Bucket]:
        """Create the component and return it with one admin badge."""
        admin_badge = ResourceManager(
            ResourceType.FUNGIBLE, DIVISIBILITY_NONE, {"name": "Donations Badge Mint Auth"}
        )
        admin_bucket = admin_badge.mint(2)
        returned = admin_bucket.take(1)
        return cls(xrd, admin_badge, Vault.from_bucket(admin_bucket), fee_percent), returned

    def make_badge(self, owner: Account, identifier, title, description, url, price, supply) -> None:
        """Create `supply` badges for `owner`, each sold at `price` XRD."""
        supply = decimal_from_raw(decimal_to_raw(supply))
        price = decimal_from_raw(decimal_to_raw(price))
        if not supply > 0:
            raise LedgerError("Supply cannot be zero")
        if not price > 0:
            raise LedgerError("Price cannot be zero")

        badge = ResourceManager(
            ResourceType.FUNGIBLE,
            DIVISIBILITY_NONE,
            {
                "name": "Donations Badge",
                "identifier": identifier,
                "title": title,
                "description": description,
                "url": url,
                "price": _format_decimal(price),
            },
        )
        vault = Vault.from_bucket(badge.mint(supply))
        self.badges.setdefault(owner, []).append(vault)

    def _owner_badges(self, owner: Account) -> list[Vault]:
        try:
            return self.badges[owner]
        except KeyError:
            raise LedgerError("No badges found for this owner") from None

    def get_badges(self, owner: Account) -> list[ResourceManager]:
        """Badge resources of `owner` that still have badges available."""
        return [vault.resource for vault in self._owner_badges(owner) if vault.amount > 0]

    def donate(self, owner: Account, badge_address: ResourceManager, payment: Bucket) -> tuple[Bucket, Bucket]:
        """Buy one badge; the owner receives the price less the fee.

        Returns the badge and the change left from the payment.
        """
        badges = self._owner_badges(owner)
        if payment.resource is not self.xrd:
            raise LedgerError("You must use Radix (XRD).")
        badge = next((vault for vault in badges if vault.resource is badge_address), None)
        if badge is None:
            logger.info("No such badge found")
            raise LedgerError("No such badge found")
        if badge.is_empty():
            raise LedgerError("No badge available")

        price = Decimal(badge.resource.metadata["price"])
        if payment.amount < price:
            raise LedgerError("Not enough amount")

        price_raw = decimal_to_raw(price)
        fee_raw = _truncating_div(_truncating_div(price_raw * decimal_to_raw(self.fee), _ONE), 100)
        if not 0 <= fee_raw <= price_raw:
            raise LedgerError(f"invalid fee for price {price}")

        price_bucket = payment.take(price)
        self.collected_fees.put(price_bucket.take(decimal_from_raw(fee_raw)))
        owner.deposit(price_bucket)
        return badge.take(1), payment

    def withdraw(self, amount) -> Bucket:
        """Take `amount` of the collected fees."""
        if self.collected_fees.amount < Decimal(amount):
            raise LedgerError("Withdraw amount is larger than available assets")
        return self.collected_fees.take(amount)