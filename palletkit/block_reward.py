"""Block reward issuance and its distribution among beneficiaries.

Every time the block timestamp is set, a fixed reward is issued and split
between the treasury, the collators, the dapps-staking stakers and the dapps.
How much of the adjustable part goes to the stakers depends on how much of
the total issuance is locked in dapps staking.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable
from dataclasses import dataclass, field, fields
from typing import Any

from .balances import Balances, Imbalance
from .perbill import Perbill
from .runtime import DispatchError, Origin

log = logging.getLogger(__name__)


class InvalidDistributionConfiguration(DispatchError):
    """The shares of a distribution config do not sum to one whole."""


@dataclass(frozen=True)
class RewardDistributionConfig:
    """Shares of the block reward that go to each beneficiary.

    If ``ideal_dapps_staking_tvl`` is zero, the whole adjustable share goes
    to the stakers.
    """

    base_treasury_percent: Perbill = Perbill.from_percent(40)
    base_staker_percent: Perbill = Perbill.from_percent(25)
    dapps_percent: Perbill = Perbill.from_percent(25)
    collators_percent: Perbill = Perbill.from_percent(10)
    adjustable_percent: Perbill = Perbill.zero()
    ideal_dapps_staking_tvl: Perbill = Perbill.zero()

    def is_consistent(self) -> bool:
        """``True`` if all shares except the ideal TVL sum to one whole."""
        shares = (
            self.base_treasury_percent,
            self.base_staker_percent,
            self.dapps_percent,
            self.collators_percent,
            self.adjustable_percent,
        )
        total: Perbill | None = Perbill.zero()
        for share in shares:
            total = total.checked_add(share)
            if total is None:
                return False
        return total == Perbill.one()


@dataclass(frozen=True)
class DistributionConfigurationChanged:
    """Event: the distribution configuration has been updated."""

    config: RewardDistributionConfig


@dataclass
class BeneficiaryPayout:
    """Pays reward imbalances into the beneficiaries' pot accounts."""

    currency: Balances
    treasury_pot: Hashable
    collator_pot: Hashable
    stakers_pot: Hashable
    dapps_pot: Hashable

    def treasury(self, reward: Imbalance) -> None:
        self.currency.resolve_creating(self.treasury_pot, reward)

    def collators(self, reward: Imbalance) -> None:
        self.currency.resolve_creating(self.collator_pot, reward)

    def dapps_staking(self, stakers: Imbalance, dapps: Imbalance) -> None:
        self.currency.resolve_creating(self.stakers_pot, stakers)
        self.currency.resolve_creating(self.dapps_pot, dapps)


@dataclass
class BlockReward:
    """Issues a block reward on every timestamp and distributes it."""

    currency: Balances
    tvl_provider: Callable[[], int]
    payout: Any
    reward_amount: int
    reward_config: RewardDistributionConfig = field(
        default_factory=RewardDistributionConfig
    )
    events: list = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        if self.reward_amount < 0:
            raise ValueError("reward amount cannot be negative")
        if not self.reward_config.is_consistent():
            raise ValueError("genesis reward distribution config is not consistent")

    def set_configuration(
        self, origin: Origin, reward_config: RewardDistributionConfig
    ) -> None:
        """Replace the distribution config used from the next block reward.

        Requires the root origin and a config whose shares sum to one whole.
        """
        origin.ensure_root()
        if not reward_config.is_consistent():
            raise InvalidDistributionConfiguration(
                "sum of all shares must be one whole"
            )
        self.reward_config = reward_config
        self.events.append(DistributionConfigurationChanged(reward_config))

    def on_timestamp_set(self, moment: Any) -> None:
        """Issue the block reward and distribute it."""
        self._distribute_rewards(self.currency.issue(self.reward_amount))

    def tvl_percentage(self) -> Perbill:
        """Value locked in dapps staking as a share of total issuance."""
        total_issuance = self.currency.total_issuance()
        if total_issuance == 0:
            log.warning("Total issuance is zero - this should be impossible.")
            return Perbill.zero()
        return Perbill.from_rational(self.tvl_provider(), total_issuance)

    def _distribute_rewards(self, block_reward: Imbalance) -> None:
        config = self.reward_config
        amount = block_reward.peek()

        base_staker_balance = config.base_staker_percent * amount
        dapps_balance = config.dapps_percent * amount
        collator_balance = config.collators_percent * amount
        adjustable_balance = config.adjustable_percent * amount

        if config.ideal_dapps_staking_tvl.is_zero():
            adjustable_staker_part = adjustable_balance
        else:
            factor = self.tvl_percentage() / config.ideal_dapps_staking_tvl
            adjustable_staker_part = factor * adjustable_balance

        total_staker_balance = base_staker_balance + adjustable_staker_part

        dapps_imbalance, remainder = block_reward.split(dapps_balance)
        stakers_imbalance, remainder = remainder.split(total_staker_balance)
        collator_imbalance, treasury_imbalance = remainder.split(collator_balance)

        self.payout.treasury(treasury_imbalance)
        self.payout.collators(collator_imbalance)
        self.payout.dapps_staking(stakers_imbalance, dapps_imbalance)


__all__ = [
    "BeneficiaryPayout",
    "BlockReward",
    "DistributionConfigurationChanged",
    "InvalidDistributionConfiguration",
    "RewardDistributionConfig",
]

# Keep the field list available for callers that introspect configs.
CONFIG_FIELDS = tuple(f.name for f in fields(RewardDistributionConfig))