"""Bookkeeping types of dapps staking: eras, stakes, unbonding and ledgers."""

from __future__ import annotations

import bisect
import enum
from dataclasses import dataclass, field, replace

ERA_MAX = 2**32 - 1


def _check_amount(value: int) -> None:
    if value < 0:
        raise ValueError("amount cannot be negative")


@dataclass(frozen=True)
class DAppState:
    """State of a dapp: registered, or unregistered since a given era.

    An unregistered dapp can still be claimed for past eras and unbonded
    from, but no new stake can be added to it.
    """

    unregistered_in: int | None = None

    @property
    def is_registered(self) -> bool:
        return self.unregistered_in is None


@dataclass
class DAppInfo:
    """A dapp's developer (owner) account and its current state."""

    developer: object
    state: DAppState = field(default_factory=DAppState)


class Forcing(enum.Enum):
    """Mode of era forcing."""

    NOT_FORCING = "NotForcing"
    FORCE_NEW = "ForceNew"


@dataclass
class RewardInfo:
    """Rewards allocated to stakers and to dapps in an era."""

    stakers: int = 0
    dapps: int = 0


@dataclass
class EraInfo:
    """Total rewards, staked and locked amounts of an era."""

    rewards: RewardInfo = field(default_factory=RewardInfo)
    staked: int = 0
    locked: int = 0


@dataclass
class ContractStakeInfo:
    """Stake on one contract in one era, and whether its reward was claimed."""

    total: int = 0
    number_of_stakers: int = 0
    contract_reward_claimed: bool = False


class Version(enum.Enum):
    """Storage version of the dapps staking state."""

    V1_0_0 = "V1_0_0"
    V2_0_0 = "V2_0_0"
    V3_0_0 = "V3_0_0"


CURRENT_VERSION = Version.V3_0_0


@dataclass(frozen=True)
class EraStake:
    """The amount staked as of an era."""

    staked: int
    era: int


@dataclass
class StakerInfo:
    """Stakes of one staker on one contract over its unclaimed eras.

    Each entry gives the staked amount from its era on, until the era of the
    next entry. An era with no entry keeps the amount of the entry before it.
    """

    stakes: list[EraStake] = field(default_factory=list)

    def is_empty(self) -> bool:
        """``True`` if no active stakes and no unclaimed eras remain."""
        return not self.stakes

    def __len__(self) -> int:
        return len(self.stakes)

    def _change(self, current_era: int, new_value: int) -> None:
        if self.stakes[-1].era == current_era:
            self.stakes[-1] = EraStake(new_value, current_era)
        else:
            self.stakes.append(EraStake(new_value, current_era))

    def stake(self, current_era: int, value: int) -> None:
        """Add ``value`` to the stake from ``current_era`` on.

        Raises ``ValueError`` if ``current_era`` is before the latest entry.
        """
        _check_amount(value)
        if not self.stakes:
            self.stakes.append(EraStake(value, current_era))
            return
        last = self.stakes[-1]
        if last.era > current_era:
            raise ValueError("Unexpected era")
        self._change(current_era, last.staked + value)

    def unstake(self, current_era: int, value: int) -> None:
        """Take ``value`` (at most what is staked) off from ``current_era`` on.

        Raises ``ValueError`` if ``current_era`` is before the latest entry.
        A leading entry with nothing staked is dropped.
        """
        _check_amount(value)
        if not self.stakes:
            return
        last = self.stakes[-1]
        if last.era > current_era:
            raise ValueError("Unexpected era")
        self._change(current_era, max(last.staked - value, 0))
        if self.stakes and self.stakes[0].staked == 0:
            del self.stakes[0]

    def claim(self) -> tuple[int, int]:
        """Claim the oldest unclaimed era.

        Returns ``(era, staked amount)``, or ``(0, 0)`` if nothing is left.
        """
        if not self.stakes:
            return 0, 0
        first = self.stakes[0]
        if len(self.stakes) == 1 or self.stakes[1].era > first.era + 1:
            self.stakes[0] = EraStake(first.staked, min(first.era + 1, ERA_MAX))
        else:
            del self.stakes[0]
        if self.stakes and self.stakes[0].staked == 0:
            del self.stakes[0]
        return first.era, first.staked

    def latest_staked_value(self) -> int:
        """The amount staked now; zero if fully unstaked."""
        return self.stakes[-1].staked if self.stakes else 0


@dataclass
class UnlockingChunk:
    """An amount being unbonded and the era in which it unlocks."""

    amount: int = 0
    unlock_era: int = 0

    def add_amount(self, amount: int) -> None:
        self.amount += amount


@dataclass
class UnbondingInfo:
    """Unlocking chunks, kept in ascending order of unlock era."""

    unlocking_chunks: list[UnlockingChunk] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.unlocking_chunks)

    def is_empty(self) -> bool:
        return not self.unlocking_chunks

    def sum(self) -> int:
        """Total amount of all chunks."""
        return sum(chunk.amount for chunk in self.unlocking_chunks)

    def add(self, chunk: UnlockingChunk) -> None:
        """Add a chunk, merging it into one with the same unlock era."""
        pos = bisect.bisect_left(
            self.unlocking_chunks, chunk.unlock_era, key=lambda c: c.unlock_era
        )
        if (
            pos < len(self.unlocking_chunks)
            and self.unlocking_chunks[pos].unlock_era == chunk.unlock_era
        ):
            self.unlocking_chunks[pos].add_amount(chunk.amount)
        else:
            self.unlocking_chunks.insert(pos, replace(chunk))

    def partition(self, era: int) -> tuple[UnbondingInfo, UnbondingInfo]:
        """Split into chunks unlocking by ``era`` and all the others.

        Order is preserved in both parts.
        """
        unlocked = [replace(c) for c in self.unlocking_chunks if c.unlock_era <= era]
        locked = [replace(c) for c in self.unlocking_chunks if c.unlock_era > era]
        return UnbondingInfo(unlocked), UnbondingInfo(locked)


class RewardDestination(enum.Enum):
    """Where a staker's rewards go."""

    FREE_BALANCE = "FreeBalance"
    STAKE_BALANCE = "StakeBalance"


@dataclass
class AccountLedger:
    """An account's locked and unbonding balances and its reward destination."""

    locked: int = 0
    unbonding_info: UnbondingInfo = field(default_factory=UnbondingInfo)
    reward_destination: RewardDestination = RewardDestination.STAKE_BALANCE

    def is_empty(self) -> bool:
        """``True`` if nothing is locked and nothing is unbonding."""
        return self.locked == 0 and self.unbonding_info.is_empty()