from decimal import Decimal

import pytest

from vaultworks.resources import (
    AuthorizationError,
    LedgerError,
    ResourceManager,
    ResourceType,
    Runtime,
)
from vaultworks.vesting import Vesting


@pytest.fixture
def runtime():
    return Runtime(5)


@pytest.fixture
def token():
    return ResourceManager(ResourceType.FUNGIBLE, 18, {"name": "Token"})


@pytest.fixture
def setup(runtime):
    vesting, admin_bucket = Vesting.instantiate(runtime)
    return vesting, admin_bucket


def _add(vesting, admin_bucket, token, total=1000, cliff=10, end=20, pct="0.5"):
    return vesting.add_beneficiary(admin_bucket.create_proof(), token.mint(total), cliff, end, Decimal(pct))


def test_instantiate_returns_single_admin_badge(setup):
    vesting, admin_bucket = setup
    assert admin_bucket.amount == Decimal(1)
    assert admin_bucket.resource is vesting.admin_badge
    assert vesting.min_admins_required_for_multi_admin == Decimal(1)
    assert vesting.admin_may_terminate is True


def test_add_beneficiary_mints_badge_with_schedule(setup, token, runtime):
    vesting, admin_bucket = setup
    badge = _add(vesting, admin_bucket, token)
    assert badge.amount == Decimal(1)
    assert badge.non_fungible_ids == frozenset({1})
    schedule = vesting.beneficiary_badge.get_non_fungible_data(1)
    assert schedule.total_vesting_amount == Decimal(1000)
    assert schedule.enrollment_epoch == runtime.epoch
    assert schedule.cliff_epoch == runtime.epoch + 10
    assert schedule.end_epoch == runtime.epoch + 20
    assert vesting.funds[1].amount == Decimal(1000)


def test_withdraw_before_cliff_yields_nothing(setup, token, runtime):
    vesting, admin_bucket = setup
    badge = _add(vesting, admin_bucket, token)
    runtime.advance(9)
    assert vesting.withdraw_funds(badge.create_proof()).amount == Decimal(0)


def test_withdrawals_follow_schedule_and_sum_to_total(setup, token, runtime):
    vesting, admin_bucket = setup
    badge = _add(vesting, admin_bucket, token)
    schedule = vesting.beneficiary_badge.get_non_fungible_data(1)
    withdrawn = Decimal(0)
    for _ in range(25):
        runtime.advance(1)
        withdrawn += vesting.withdraw_funds(badge.create_proof()).amount
        assert withdrawn == schedule.get_vested_amount(runtime.epoch)
    assert withdrawn == Decimal(1000)
    assert vesting.funds[1].is_empty()


def test_rejects_non_fungible_and_empty_funds(setup, token):
    vesting, admin_bucket = setup
    nft = ResourceManager(ResourceType.NON_FUNGIBLE)
    with pytest.raises(LedgerError, match="non-fungible"):
        vesting.add_beneficiary(admin_bucket.create_proof(), nft.mint_non_fungible("a", None), 1, 2, Decimal(0))
    with pytest.raises(LedgerError, match="empty bucket"):
        vesting.add_beneficiary(admin_bucket.create_proof(), token.mint(0), 1, 2, Decimal(0))


def test_add_beneficiary_requires_admin_badge(setup, token):
    vesting, _ = setup
    other = ResourceManager(ResourceType.FUNGIBLE, 0).mint(1)
    with pytest.raises(AuthorizationError):
        vesting.add_beneficiary(other.create_proof(), token.mint(10), 1, 2, Decimal(0))


def test_invalid_schedule_is_rejected(setup, token):
    vesting, admin_bucket = setup
    with pytest.raises(ValueError):
        vesting.add_beneficiary(admin_bucket.create_proof(), token.mint(10), 5, 2, Decimal(0))
    assert vesting.funds == {}


def test_terminate_returns_unclaimed_and_blocks_withdrawal(setup, token, runtime):
    vesting, admin_bucket = setup
    badge = _add(vesting, admin_bucket, token)
    runtime.advance(15)
    claimed = vesting.withdraw_funds(badge.create_proof()).amount
    unclaimed = vesting.terminate_beneficiary(admin_bucket.create_proof(), 1)
    assert claimed + unclaimed.amount == Decimal(1000)
    assert len(vesting.dead_vaults) == 1
    with pytest.raises(LedgerError, match="terminated"):
        vesting.withdraw_funds(badge.create_proof())
    with pytest.raises(LedgerError, match="Invalid beneficiary id"):
        vesting.terminate_beneficiary(admin_bucket.create_proof(), 1)


def test_ids_keep_counting_after_termination(setup, token):
    vesting, admin_bucket = setup
    _add(vesting, admin_bucket, token)
    vesting.terminate_beneficiary(admin_bucket.create_proof(), 1)
    second = _add(vesting, admin_bucket, token)
    assert second.non_fungible_ids == frozenset({2})


def test_disable_termination(setup, token):
    vesting, admin_bucket = setup
    _add(vesting, admin_bucket, token)
    vesting.disable_termination(admin_bucket.create_proof())
    assert vesting.admin_may_terminate is False
    with pytest.raises(LedgerError, match="termination rights"):
        vesting.terminate_beneficiary(admin_bucket.create_proof(), 1)


def test_add_admin_raises_majority_requirement(setup, token):
    vesting, admin_bucket = setup
    new_badges = vesting.add_admin(admin_bucket.create_proof(), 1)
    assert new_badges.amount == Decimal(1)
    assert vesting.min_admins_required_for_multi_admin == vesting.admin_badge.total_supply
    _add(vesting, admin_bucket, token)
    with pytest.raises(AuthorizationError):
        vesting.terminate_beneficiary(admin_bucket.create_proof(), 1)
    admin_bucket.put(new_badges)
    returned = vesting.terminate_beneficiary(admin_bucket.create_proof(), 1)
    assert returned.amount == Decimal(1000)


def test_add_admin_majority_with_many_badges(setup):
    vesting, admin_bucket = setup
    vesting.add_admin(admin_bucket.create_proof(), 4)
    assert vesting.admin_badge.total_supply == Decimal(5)
    assert vesting.min_admins_required_for_multi_admin == Decimal(3)


def test_add_admin_rejects_fractional_badges(setup):
    vesting, admin_bucket = setup
    with pytest.raises(LedgerError):
        vesting.add_admin(admin_bucket.create_proof(), Decimal("0.5"))


def test_withdraw_rejects_wrong_badge_and_multiple_badges(setup, token):
    vesting, admin_bucket = setup
    first = _add(vesting, admin_bucket, token)
    second = _add(vesting, admin_bucket, token)
    with pytest.raises(LedgerError, match="Invalid badge"):
        vesting.withdraw_funds(admin_bucket.create_proof())
    first.put(second)
    with pytest.raises(LedgerError, match="At least 1"):
        vesting.withdraw_funds(first.create_proof())