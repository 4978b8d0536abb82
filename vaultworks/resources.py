"""An in-memory ledger of resources, buckets, vaults, proofs and accounts."""

from __future__ import annotations

import enum
import itertools
from dataclasses import dataclass, field
from decimal import Decimal

from vaultworks.number import DECIMAL_PLACES, decimal_from_raw, decimal_to_raw

DIVISIBILITY_NONE = 0
DIVISIBILITY_MAXIMUM = DECIMAL_PLACES

_ONE = 10**DECIMAL_PLACES
_addresses = itertools.count(1)


class LedgerError(Exception):
    """A resource operation that the ledger refuses."""


class AuthorizationError(LedgerError):
    """A call made without the badges it requires."""


class ResourceType(enum.Enum):
    FUNGIBLE = "fungible"
    NON_FUNGIBLE = "non_fungible"


def _raw_amount(value, divisibility: int) -> int:
    """Validate an amount and return it as a raw fixed-point integer."""
    try:
        raw = decimal_to_raw(value)
    except (ArithmeticError, ValueError, TypeError) as exc:
        raise LedgerError(f"invalid amount: {value!r}") from exc
    if raw < 0:
        raise LedgerError(f"amount must not be negative: {value!r}")
    if raw % 10 ** (DECIMAL_PLACES - divisibility):
        raise LedgerError(f"amount {value!r} exceeds divisibility {divisibility}")
    return raw


class ResourceManager:
    """Defines a resource and tracks its supply and non-fungible data."""

    def __init__(
        self,
        resource_type=ResourceType.FUNGIBLE,
        divisibility: int = DIVISIBILITY_MAXIMUM,
        metadata=None,
    ) -> None:
        self.resource_type = ResourceType(resource_type)
        if self.resource_type is ResourceType.NON_FUNGIBLE:
            divisibility = DIVISIBILITY_NONE
        if not DIVISIBILITY_NONE <= divisibility <= DIVISIBILITY_MAXIMUM:
            raise ValueError(f"divisibility must be between 0 and {DIVISIBILITY_MAXIMUM}")
        self.divisibility = divisibility
        self.metadata = dict(metadata or {})
        self.address = f"resource_{next(_addresses)}"
        self._supply_raw = 0
        self._non_fungibles: dict = {}

    def __repr__(self) -> str:
        return f"ResourceManager({self.address}, {self.resource_type.value})"

    @property
    def is_fungible(self) -> bool:
        return self.resource_type is ResourceType.FUNGIBLE

    @property
    def total_supply(self) -> Decimal:
        return decimal_from_raw(self._supply_raw)

    def mint(self, amount) -> Bucket:
        """Create `amount` new fungible units."""
        if not self.is_fungible:
            raise LedgerError("non-fungible resources are minted by id")
        raw = _raw_amount(amount, self.divisibility)
        self._supply_raw += raw
        bucket = Bucket(self)
        bucket._raw = raw
        return bucket

    def mint_non_fungible(self, nf_id, data) -> Bucket:
        """Create one non-fungible unit with the given id and data."""
        if self.is_fungible:
            raise LedgerError("fungible resources cannot be minted by id")
        if nf_id in self._non_fungibles:
            raise LedgerError(f"non-fungible id already exists: {nf_id!r}")
        self._non_fungibles[nf_id] = data
        self._supply_raw += _ONE
        bucket = Bucket(self)
        bucket._ids.add(nf_id)
        return bucket

    def burn(self, bucket: Bucket) -> None:
        """Destroy everything held by `bucket`."""
        if bucket.resource is not self:
            raise LedgerError("bucket holds a different resource")
        for nf_id in bucket._ids:
            del self._non_fungibles[nf_id]
        self._supply_raw -= bucket._held_raw
        bucket._raw = 0
        bucket._ids.clear()

    def get_non_fungible_data(self, nf_id):
        try:
            return self._non_fungibles[nf_id]
        except KeyError:
            raise LedgerError(f"no non-fungible with id {nf_id!r}") from None


class Bucket:
    """A transient container of one resource."""

    def __init__(self, resource: ResourceManager) -> None:
        self.resource = resource
        self._raw = 0
        self._ids: set = set()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.resource.address}, {self.amount})"

    @property
    def _held_raw(self) -> int:
        return self._raw if self.resource.is_fungible else len(self._ids) * _ONE

    @property
    def amount(self) -> Decimal:
        return decimal_from_raw(self._held_raw)

    @property
    def non_fungible_ids(self) -> frozenset:
        return frozenset(self._ids)

    def is_empty(self) -> bool:
        return self._held_raw == 0

    def put(self, other: Bucket) -> None:
        """Move everything in `other` into this container."""
        if other is self:
            raise LedgerError("cannot put a bucket into itself")
        if other.resource is not self.resource:
            raise LedgerError("cannot mix different resources")
        self._raw += other._raw
        self._ids |= other._ids
        other._raw = 0
        other._ids.clear()

    def take(self, amount) -> Bucket:
        """Split off `amount` into a new bucket."""
        raw = _raw_amount(amount, self.resource.divisibility)
        if raw > self._held_raw:
            raise LedgerError(f"insufficient balance: have {self.amount}, need {amount}")
        taken = Bucket(self.resource)
        if self.resource.is_fungible:
            self._raw -= raw
            taken._raw = raw
        else:
            chosen = sorted(self._ids)[: raw // _ONE]
            self._ids.difference_update(chosen)
            taken._ids.update(chosen)
        return taken

    def take_all(self) -> Bucket:
        taken = Bucket(self.resource)
        taken.put(self)
        return taken

    def create_proof(self) -> Proof:
        """Prove ownership of the contents without giving them away."""
        if self.is_empty():
            raise LedgerError("cannot create a proof of an empty container")
        return Proof(self.resource, self.amount, self.non_fungible_ids)


class Vault(Bucket):
    """A persistent container of one resource."""

    @classmethod
    def from_bucket(cls, bucket: Bucket) -> Vault:
        vault = cls(bucket.resource)
        vault.put(bucket)
        return vault


@dataclass(frozen=True)
class Proof:
    """Evidence that some amount of a resource is held."""

    resource: ResourceManager
    amount: Decimal
    non_fungible_ids: frozenset = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", decimal_from_raw(decimal_to_raw(self.amount)))
        object.__setattr__(self, "non_fungible_ids", frozenset(self.non_fungible_ids))

    def require(self, resource: ResourceManager, amount=1) -> Proof:
        """Return this proof if it shows at least `amount` of `resource`."""
        if self.resource is not resource:
            raise AuthorizationError("proof is of the wrong resource")
        if self.amount < Decimal(amount):
            raise AuthorizationError(f"proof shows {self.amount}, {amount} required")
        return self


class Account:
    """A holder of vaults, one per resource."""

    def __init__(self) -> None:
        self._vaults: dict[ResourceManager, Vault] = {}

    def deposit(self, bucket: Bucket) -> None:
        vault = self._vaults.setdefault(bucket.resource, Vault(bucket.resource))
        vault.put(bucket)

    def balance(self, resource: ResourceManager) -> Decimal:
        vault = self._vaults.get(resource)
        return vault.amount if vault is not None else decimal_from_raw(0)

    def withdraw(self, resource: ResourceManager, amount) -> Bucket:
        vault = self._vaults.setdefault(resource, Vault(resource))
        return vault.take(amount)


@dataclass
class Runtime:
    """The ledger clock, counted in epochs."""

    epoch: int = 0

    def __post_init__(self) -> None:
        if self.epoch < 0:
            raise ValueError("epoch must not be negative")

    def advance(self, epochs: int = 1) -> int:
        """Move the clock forward and return the new epoch."""
        if epochs < 0:
            raise ValueError("cannot move the clock backwards")
        self.epoch += epochs
        return self.epoch