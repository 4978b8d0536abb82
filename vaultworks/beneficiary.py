"""Vesting schedules held as data on beneficiaries' badges."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from vaultworks.number import DECIMAL_PLACES, decimal_from_raw, decimal_to_raw

_ONE = 10**DECIMAL_PLACES


def _truncating_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return -quotient if (numerator < 0) != (denominator < 0) else quotient


@dataclass(frozen=True)
class BeneficiaryVestingSchedule:
    """A linear vesting schedule with a cliff, measured in absolute epochs."""

    enrollment_epoch: int
    cliff_epoch: int
    end_epoch: int
    total_vesting_amount: Decimal
    amount_available_on_cliff: Decimal

    @classmethod
    def create(
        cls,
        current_epoch: int,
        relative_cliff_epoch: int,
        relative_ending_epoch: int,
        total_vesting_amount,
        percentage_available_on_cliff,
    ) -> BeneficiaryVestingSchedule:
        """Build a schedule whose cliff and end are relative to `current_epoch`."""
        if relative_cliff_epoch < 0:
            raise ValueError(
                "[New Vesting Schedule]: Relative cliff epoch must be larger than or equal to zero."
            )
        if relative_ending_epoch < relative_cliff_epoch:
            raise ValueError(
                "[New Vesting Schedule]: Relative ending epoch must be larger than or equal "
                "to the relative cliff epoch."
            )
        percentage = decimal_to_raw(percentage_available_on_cliff)
        if not 0 <= percentage <= _ONE:
            raise ValueError(
                "[New Vesting Schedule]: The percentage of funds available on cliff must be "
                "a value between 0 and 1"
            )
        total = decimal_to_raw(total_vesting_amount)
        on_cliff = _truncating_div(total * percentage, _ONE)
        return cls(
            enrollment_epoch=current_epoch,
            cliff_epoch=current_epoch + relative_cliff_epoch,
            end_epoch=current_epoch + relative_ending_epoch,
            total_vesting_amount=decimal_from_raw(total),
            amount_available_on_cliff=decimal_from_raw(on_cliff),
        )

    def _gradient_raw(self) -> int:
        periods = self.end_epoch - self.cliff_epoch
        if periods == 0:
            raise ZeroDivisionError("vesting period between cliff and end is zero")
        remaining = decimal_to_raw(self.total_vesting_amount) - decimal_to_raw(
            self.amount_available_on_cliff
        )
        return _truncating_div(remaining, periods)

    def vesting_gradient(self) -> Decimal:
        """Amount vested per epoch between the cliff and the end."""
        return decimal_from_raw(self._gradient_raw())

    def get_vested_amount(self, epoch: int) -> Decimal:
        """Total amount vested by `epoch`."""
        if epoch < self.cliff_epoch:
            return decimal_from_raw(0)
        linear = self._gradient_raw() * (epoch - self.cliff_epoch) + decimal_to_raw(
            self.amount_available_on_cliff
        )
        return decimal_from_raw(min(linear, decimal_to_raw(self.total_vesting_amount)))

    def get_unvested_amount(self, epoch: int) -> Decimal:
        """Amount still unvested at `epoch`."""
        unvested = decimal_to_raw(self.total_vesting_amount) - decimal_to_raw(
            self.get_vested_amount(epoch)
        )
        return decimal_from_raw(unvested)