"""A crowdsourcing campaign that collects XRD pledges towards a goal."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from vaultworks.number import decimal_from_raw, decimal_to_raw
from vaultworks.resources import (
    DIVISIBILITY_NONE,
    Bucket,
    LedgerError,
    Proof,
    ResourceManager,
    ResourceType,
    Runtime,
    Vault,
)

logger = logging.getLogger(__name__)


def _as_decimal(value) -> Decimal:
    return decimal_from_raw(decimal_to_raw(value))


@dataclass(frozen=True)
class CampaignStatus:
    """A snapshot of a campaign's progress."""

    pledged: Decimal
    patrons: int
    ended: bool
    epochs_remaining: int | None
    unclaimed: Decimal | None


class CrowdsourcingCampaign:
    """Collects pledges until a last epoch; the fundraiser may claim them if the goal is met.

    Each pledge gets its own patron badge resource, which can be handed back to
    recall the pledge as long as the campaign has not ended successfully.
    """

    def __init__(
        self,
        runtime: Runtime,
        xrd: ResourceManager,
        fundraiser_badge: ResourceManager,
        goal,
        last_epoch: int,
    ) -> None:
        self.runtime = runtime
        self.xrd = xrd
        self.fundraiser_badge = fundraiser_badge
        self.goal = _as_decimal(goal)
        self.last_epoch = last_epoch
        self.collected_xrd = Vault(xrd)
        self.patron_entries: dict[ResourceManager, Decimal] = {}

    @classmethod
    def new(
        cls, runtime: Runtime, xrd: ResourceManager, goal, campaign_duration_epochs: int
    ) -> tuple[CrowdsourcingCampaign, Bucket]:
        """Start a campaign and return it with the fundraiser's badge."""
        if campaign_duration_epochs < 0:
            raise ValueError("campaign duration must not be negative")
        fundraiser = ResourceManager(
            ResourceType.FUNGIBLE, DIVISIBILITY_NONE, {"name": "fundraiser_badge"}
        )
        badge = fundraiser.mint(1)
        last_epoch = runtime.epoch + campaign_duration_epochs
        return cls(runtime, xrd, fundraiser, goal, last_epoch), badge

    @property
    def _ended(self) -> bool:
        return self.runtime.epoch > self.last_epoch

    def status(self) -> CampaignStatus:
        """Report how much has been pledged and how long the campaign runs."""
        pledged = sum(self.patron_entries.values(), Decimal(0))
        patrons = len(self.patron_entries)
        logger.info("%s XRD collected from %s patrons", pledged, patrons)
        if not self._ended:
            remaining = self.last_epoch - self.runtime.epoch
            logger.info("campaign ends in %s epochs", remaining)
            return CampaignStatus(pledged, patrons, False, remaining, None)
        unclaimed = self.collected_xrd.amount
        logger.info("campaign has ended. campaign holds %s unclaimed XRD.", unclaimed)
        return CampaignStatus(pledged, patrons, True, None, unclaimed)

    def pledge(self, payment: Bucket) -> Bucket:
        """Pledge XRD and receive a patron badge for it."""
        if payment.amount == 0:
            raise LedgerError("you need to pay at least one XRD to become a patron.")
        if not self.runtime.epoch < self.last_epoch:
            raise LedgerError("campaign has already ended.")
        if payment.resource is not self.xrd:
            raise LedgerError("cannot mix different resources")

        patron_resource = ResourceManager(
            ResourceType.FUNGIBLE, DIVISIBILITY_NONE, {"name": "patron_badge"}
        )
        patron_badge = patron_resource.mint(1)
        self.patron_entries[patron_resource] = payment.amount
        self.collected_xrd.put(payment)
        return patron_badge

    def recall_pledge(self, patron_badge: Bucket) -> Bucket:
        """Hand back a patron badge and get the pledged XRD refunded."""
        if self._ended and self.collected_xrd.amount > self.goal:
            raise LedgerError("campaign was successful and has ended.")
        value = self.patron_entries.get(patron_badge.resource)
        if value is None:
            logger.info("no pledge found with provided badge")
            raise LedgerError("no pledge found with provided badge")
        refund = self.collected_xrd.take(value)
        del self.patron_entries[patron_badge.resource]
        patron_badge.resource.burn(patron_badge)
        return refund

    def withdraw(self, fundraiser_proof: Proof) -> Bucket:
        """As fundraiser, claim everything collected once the campaign succeeded."""
        fundraiser_proof.require(self.fundraiser_badge)
        if not self._ended:
            raise LedgerError("campaign has not ended yet.")
        if self.collected_xrd.amount < self.goal:
            raise LedgerError("campaign did not reach it's goal.")
        return self.collected_xrd.take_all()