# vaultworks

A small, self-contained library for modelling token accounting on an
in-memory ledger. It provides:

- **Fixed-point decimals and arbitrary-precision math** (`vaultworks.number`):
  conversions between 18-digit fixed-point decimals and scaled big integers,
  exact integer n-th roots and `scaled_power` for fractional exponents.
- **Bonding curves** (`vaultworks.curves`): `BasicBondingCurve` (a flat 1:1
  curve) and `RatioBondingCurve` (a reserve-ratio curve), both following the
  `BondingCurve` interface.
- **Resources** (`vaultworks.resources`): `ResourceManager`, `Bucket`,
  `Vault`, `Proof`, `Account` and an epoch-based `Runtime`.
- **Vesting** (`vaultworks.vesting`, `vaultworks.beneficiary`): linear vesting
  with a cliff, multiple admins and the option to give up termination rights.
- **Crowdfunding** (`vaultworks.crowdsourcing`): `CrowdsourcingCampaign` with
  pledges, recalls and a goal-gated withdrawal.
- **Donations** (`vaultworks.donations`): sell priced badges on behalf of an
  owner and keep a percentage fee.
- **Bonding-curve market maker** (`vaultworks.amm`): `BondingAMM` that mints
  and burns a continuous token against a reserve.

## Installation

```
pip install vaultworks
```

Python 3.10 or later is required; there are no runtime dependencies.

## Bonding curve math

```python
from decimal import Decimal
from vaultworks.curves import get_mint_amount, get_return_amount

minted = get_mint_amount(Decimal(300), Decimal(60000), Decimal(300000), 1, 5, 384)
# Decimal('299.401793723844635041')
```

`RatioBondingCurve(1, 5, 384)` wraps the same calculations as an object with
`get_initial_supply`, `get_mint_amount`, `get_return_amount` and `get_price`.

## Vesting

```python
from decimal import Decimal
from vaultworks.resources import Runtime
from vaultworks.vesting import Vesting

runtime = Runtime(0)
vesting, admin_badge = Vesting.instantiate(runtime)
```

An admin proves control with a proof of the admin badge, adds beneficiaries
with `add_beneficiary`, and each beneficiary later calls `withdraw_funds` with
a proof of their own badge. As epochs pass (`runtime.advance(n)`), more of the
funds vest.

## Errors

Every rule the ledger enforces raises `LedgerError` (or its subclass
`AuthorizationError` when a required badge is missing), with a message that
says which check failed.

## Running the tests

```
pip install -e ".[test]"
pytest
```