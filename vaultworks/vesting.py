"""Linear vesting of funds to beneficiaries, administered by badge holders."""

from __future__ import annotations

import logging
import math
from decimal import Decimal

from vaultworks.beneficiary import BeneficiaryVestingSchedule
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


class Vesting:
    """Holds each beneficiary's unvested funds and releases them as they vest.

    Admins hold the admin badge. Adding a beneficiary needs one admin badge;
    terminating a beneficiary, adding admins and disabling termination need a
    majority of all admin badges in existence.
    """

    def __init__(
        self,
        runtime: Runtime,
        admin_badge: ResourceManager,
        beneficiary_badge: ResourceManager,
        internal_admin_badge: Vault,
    ) -> None:
        self.runtime = runtime
        self.admin_badge = admin_badge
        self.beneficiary_badge = beneficiary_badge
        self._internal_admin_badge = internal_admin_badge
        self.funds: dict[int, Vault] = {}
        self.dead_vaults: list[Vault] = []
        self.min_admins_required_for_multi_admin = Decimal(1)
        self.admin_may_terminate = True

    @classmethod
    def instantiate(cls, runtime: Runtime) -> tuple[Vesting, Bucket]:
        """Create a vesting component and return it with its first admin badge."""
        internal_admin = ResourceManager(
            ResourceType.FUNGIBLE,
            DIVISIBILITY_NONE,
            {
                "name": "Vesting Internal Admin Badge",
                "description": "A badge used by vesting components to ensure mint and burn other badges.",
            },
        )
        internal_admin_badge = Vault.from_bucket(internal_admin.mint(1))

        admin_badge = ResourceManager(
            ResourceType.FUNGIBLE,
            DIVISIBILITY_NONE,
            {
                "name": "Vesting Admin Badge",
                "description": "An admin badge with the authority to terminate the vesting of tokens",
            },
        )
        admin_bucket = admin_badge.mint(1)

        beneficiary_badge = ResourceManager(
            ResourceType.NON_FUNGIBLE,
            DIVISIBILITY_NONE,
            {
                "name": "Beneficiary Badge",
                "description": "A badge provided to beneficiaries by the vesting component for authentication",
            },
        )

        vesting = cls(runtime, admin_badge, beneficiary_badge, internal_admin_badge)
        return vesting, admin_bucket

    def _require_admin(self, admin_proof: Proof) -> None:
        admin_proof.require(self.admin_badge, 1)

    def _require_multi_admin(self, admin_proof: Proof) -> None:
        admin_proof.require(self.admin_badge, self.min_admins_required_for_multi_admin)

    def add_beneficiary(
        self,
        admin_proof: Proof,
        funds: Bucket,
        relative_cliff_epoch: int,
        relative_ending_epoch: int,
        percentage_available_on_cliff,
    ) -> Bucket:
        """Vest `funds` for a new beneficiary and return the beneficiary's badge."""
        self._require_admin(admin_proof)
        if funds.resource.resource_type is ResourceType.NON_FUNGIBLE:
            raise LedgerError("[Add Beneficiary]: Can't vest non-fungible tokens for the beneficiary.")
        if funds.is_empty():
            raise LedgerError("[Add Beneficiary]: Can't vest an empty bucket of funds.")

        beneficiary_id = len(self.funds) + len(self.dead_vaults) + 1
        schedule = BeneficiaryVestingSchedule.create(
            self.runtime.epoch,
            relative_cliff_epoch,
            relative_ending_epoch,
            funds.amount,
            percentage_available_on_cliff,
        )
        badge = self.beneficiary_badge.mint_non_fungible(beneficiary_id, schedule)
        self.funds[beneficiary_id] = Vault.from_bucket(funds)
        return badge

    def terminate_beneficiary(self, admin_proof: Proof, beneficiary_id: int) -> Bucket:
        """Stop a beneficiary's vesting and return their unclaimed funds."""
        self._require_multi_admin(admin_proof)
        if beneficiary_id not in self.funds:
            raise LedgerError("[Beneficiary Termination]: Invalid beneficiary id provided.")
        if not self.admin_may_terminate:
            raise LedgerError(
                "[Beneficiary Termination]: Admin has given up termination rights and may "
                "no longer terminate vesting."
            )
        vault = self.funds.pop(beneficiary_id)
        unclaimed = vault.take_all()
        self.dead_vaults.append(vault)
        return unclaimed

    def add_admin(self, admin_proof: Proof, admin_badges_to_mint) -> Bucket:
        """Mint new admin badges and recompute the majority needed for multi-admin calls."""
        self._require_multi_admin(admin_proof)
        badges = self.admin_badge.mint(admin_badges_to_mint)
        supply = self.admin_badge.total_supply
        if supply <= 2:
            self.min_admins_required_for_multi_admin = supply
        else:
            self.min_admins_required_for_multi_admin = Decimal(math.ceil(supply / 2))
        logger.info(
            "[Add Admin]: Minimum required admins is: %s",
            self.min_admins_required_for_multi_admin,
        )
        return badges

    def withdraw_funds(self, beneficiary_badge: Proof) -> Bucket:
        """Return the funds vested so far and not yet withdrawn."""
        if beneficiary_badge.resource is not self.beneficiary_badge:
            raise LedgerError("[Withdraw Funds]: Invalid badge provided.")
        if beneficiary_badge.amount != 1:
            raise LedgerError("[Withdraw Funds]: At least 1 Beneficiary badge is required.")
        (beneficiary_id,) = beneficiary_badge.non_fungible_ids
        if beneficiary_id not in self.funds:
            raise LedgerError(
                "[Withdraw Funds]: Vesting has been terminated. Contact your admin for more information."
            )
        schedule = self.beneficiary_badge.get_non_fungible_data(beneficiary_id)
        vault = self.funds[beneficiary_id]
        claim_amount = vault.amount - schedule.get_unvested_amount(self.runtime.epoch)
        logger.info("[Withdraw Funds]: Withdraw successful. Withdrawing %s tokens", claim_amount)
        return vault.take(claim_amount)

    def disable_termination(self, admin_proof: Proof) -> None:
        """Give up the admins' right to terminate vesting, for good."""
        self._require_multi_admin(admin_proof)
        self.admin_may_terminate = False