from decimal import Decimal

import pytest

from vaultworks.resources import (
    Account,
    AuthorizationError,
    Bucket,
    LedgerError,
    Proof,
    ResourceManager,
    ResourceType,
    Runtime,
    Vault,
)


@pytest.fixture
def token():
    return ResourceManager(ResourceType.FUNGIBLE, 18, {"name": "Token"})


@pytest.fixture
def badge():
    return ResourceManager(ResourceType.NON_FUNGIBLE, 0, {"name": "Badge"})


def test_mint_sets_supply_and_amount(token):
    bucket = token.mint("12.5")
    assert bucket.amount == Decimal("12.5")
    assert token.total_supply == bucket.amount
    assert token.metadata["name"] == "Token"


def test_take_splits_bucket(token):
    bucket = token.mint(10)
    taken = bucket.take(3)
    assert taken.amount == Decimal(3)
    assert taken.amount + bucket.amount == Decimal(10)
    assert token.total_supply == Decimal(10)


def test_take_more_than_held_raises(token):
    bucket = token.mint(1)
    with pytest.raises(LedgerError):
        bucket.take(2)
    assert bucket.amount == Decimal(1)


@pytest.mark.parametrize("amount", ["-1", "abc", "0.0000000000000000001"])
def test_invalid_amounts_raise(token, amount):
    with pytest.raises(LedgerError):
        token.mint(amount)


def test_divisibility_none_rejects_fractions():
    whole = ResourceManager(ResourceType.FUNGIBLE, 0, {})
    with pytest.raises(LedgerError):
        whole.mint("0.5")
    bucket = whole.mint(2)
    with pytest.raises(LedgerError):
        bucket.take("1.5")


def test_put_moves_contents(token):
    first = token.mint(4)
    second = token.mint(6)
    first.put(second)
    assert first.amount == Decimal(10)
    assert second.is_empty()


def test_put_rejects_other_resource(token):
    other = ResourceManager(ResourceType.FUNGIBLE, 18, {})
    with pytest.raises(LedgerError):
        token.mint(1).put(other.mint(1))


def test_take_all_empties(token):
    bucket = token.mint(7)
    taken = bucket.take_all()
    assert taken.amount == Decimal(7)
    assert bucket.is_empty()


def test_burn_reduces_supply(token):
    bucket = token.mint(10)
    burned = bucket.take(4)
    token.burn(burned)
    assert burned.is_empty()
    assert token.total_supply == bucket.amount


def test_burn_foreign_bucket_raises(token):
    other = ResourceManager(ResourceType.FUNGIBLE, 18, {})
    with pytest.raises(LedgerError):
        token.burn(other.mint(1))


def test_non_fungible_mint_and_data(badge):
    data = {"role": "member"}
    bucket = badge.mint_non_fungible(1, data)
    assert bucket.amount == Decimal(1)
    assert bucket.non_fungible_ids == frozenset({1})
    assert badge.get_non_fungible_data(1) is data
    with pytest.raises(LedgerError):
        badge.mint_non_fungible(1, data)


def test_mint_kind_mismatch_raises(token, badge):
    with pytest.raises(LedgerError):
        badge.mint(1)
    with pytest.raises(LedgerError):
        token.mint_non_fungible(1, None)


def test_non_fungible_take_lowest_ids(badge):
    bucket = badge.mint_non_fungible(3, "c")
    bucket.put(badge.mint_non_fungible(1, "a"))
    bucket.put(badge.mint_non_fungible(2, "b"))
    taken = bucket.take(1)
    assert taken.non_fungible_ids == frozenset({1})
    assert bucket.non_fungible_ids == frozenset({2, 3})


def test_burn_non_fungible_removes_data(badge):
    bucket = badge.mint_non_fungible(5, "x")
    badge.burn(bucket)
    assert badge.total_supply == Decimal(0)
    with pytest.raises(LedgerError):
        badge.get_non_fungible_data(5)


def test_create_proof_keeps_contents(badge):
    bucket = badge.mint_non_fungible(9, "x")
    proof = bucket.create_proof()
    assert proof.amount == bucket.amount
    assert proof.non_fungible_ids == frozenset({9})
    assert proof.resource is badge
    assert bucket.amount == Decimal(1)


def test_proof_of_empty_bucket_raises(token):
    with pytest.raises(LedgerError):
        Bucket(token).create_proof()


def test_proof_require(token):
    proof = token.mint(2).create_proof()
    assert proof.require(token, 2) is proof
    with pytest.raises(AuthorizationError):
        proof.require(token, 3)
    with pytest.raises(AuthorizationError):
        proof.require(ResourceManager(ResourceType.FUNGIBLE, 18, {}))


def test_proof_normalises_amount(token):
    proof = Proof(token, 3, [1, 2])
    assert proof.amount == Decimal(3)
    assert proof.non_fungible_ids == frozenset({1, 2})


def test_vault_from_bucket(token):
    bucket = token.mint(8)
    vault = Vault.from_bucket(bucket)
    assert vault.amount == Decimal(8)
    assert bucket.is_empty()
    assert vault.take(3).amount == Decimal(3)


def test_account_deposit_withdraw(token):
    account = Account()
    assert account.balance(token) == Decimal(0)
    account.deposit(token.mint(10))
    withdrawn = account.withdraw(token, 4)
    assert withdrawn.amount == Decimal(4)
    assert account.balance(token) + withdrawn.amount == Decimal(10)
    with pytest.raises(LedgerError):
        account.withdraw(token, 100)


def test_runtime_advance():
    runtime = Runtime(3)
    assert runtime.advance(2) == 3 + 2
    assert runtime.epoch == 3 + 2
    with pytest.raises(ValueError):
        runtime.advance(-1)
    with pytest.raises(ValueError):
        Runtime(-1)