"""In-memory ledger with vesting, crowdfunding, donations and bonding-curve market makers."""

__version__ = "0.1.0"

__all__ = [
    "amm",
    "beneficiary",
    "crowdsourcing",
    "curves",
    "donations",
    "number",
    "resources",
    "vesting",
]