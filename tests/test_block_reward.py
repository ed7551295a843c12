from dataclasses import dataclass, replace

import pytest

from palletkit.balances import Balances
from palletkit.block_reward import (
    BeneficiaryPayout,
    BlockReward,
    DistributionConfigurationChanged,
    InvalidDistributionConfiguration,
    RewardDistributionConfig,
)
from palletkit.perbill import Perbill
from palletkit.runtime import BadOrigin, Origin

EXISTENTIAL_DEPOSIT = 2
BLOCK_REWARD = 1_000_000
TVL = 1_000_000_000

TREASURY_POT = "moktrsry"
COLLATOR_POT = "mokcolat"
STAKERS_POT = "mokstakr"
DAPPS_POT = "mokdapps"


def pct(n):
    return Perbill.from_percent(n)


ZERO = Perbill.zero()


@pytest.fixture
def chain():
    currency = Balances(EXISTENTIAL_DEPOSIT, [(1, 9000), (2, 800), (3, 10000)])
    payout = BeneficiaryPayout(currency, TREASURY_POT, COLLATOR_POT, STAKERS_POT, DAPPS_POT)
    pallet = BlockReward(currency, lambda: TVL, payout, BLOCK_REWARD)
    return currency, pallet


@dataclass(frozen=True)
class FreeBalanceSnapshot:
    treasury: int
    collators: int
    stakers: int
    dapps: int

    @classmethod
    def take(cls, currency):
        return cls(
            currency.free_balance(TREASURY_POT),
            currency.free_balance(COLLATOR_POT),
            currency.free_balance(STAKERS_POT),
            currency.free_balance(DAPPS_POT),
        )

    def is_zero(self):
        return not (self.treasury or self.collators or self.stakers or self.dapps)

    def assert_distribution(self, post, rewards):
        assert self.treasury + rewards.base_treasury_reward + rewards.adjustable_treasury_reward == post.treasury
        assert self.stakers + rewards.base_staker_reward + rewards.adjustable_staker_reward == post.stakers
        assert self.collators + rewards.collators_reward == post.collators
        assert self.dapps + rewards.dapps_reward == post.dapps


@dataclass(frozen=True)
class Rewards:
    base_treasury_reward: int
    base_staker_reward: int
    dapps_reward: int
    collators_reward: int
    adjustable_treasury_reward: int
    adjustable_staker_reward: int

    @classmethod
    def calculate(cls, currency, config):
        adjustable_reward = config.adjustable_percent * BLOCK_REWARD
        future_total_issuance = currency.total_issuance() + BLOCK_REWARD
        tvl_percentage = Perbill.from_rational(TVL, future_total_issuance)
        if config.ideal_dapps_staking_tvl <= tvl_percentage or config.ideal_dapps_staking_tvl.is_zero():
            factor = Perbill.one()
        else:
            factor = tvl_percentage / config.ideal_dapps_staking_tvl
        adjustable_staker = factor * adjustable_reward
        return cls(
            config.base_treasury_percent * BLOCK_REWARD,
            config.base_staker_percent * BLOCK_REWARD,
            config.dapps_percent * BLOCK_REWARD,
            config.collators_percent * BLOCK_REWARD,
            adjustable_reward - adjustable_staker,
            adjustable_staker,
        )


def adjust_tvl_percentage(currency, desired):
    required = desired.saturating_reciprocal_mul(TVL)
    to_issue = max(required - currency.total_issuance(), 0)
    currency.resolve_creating(1, currency.issue(to_issue))
    assert currency.total_issuance() == required


def test_default_reward_distribution_config_is_consistent():
    assert RewardDistributionConfig().is_consistent() is True


@pytest.mark.parametrize(
    "config",
    [
        RewardDistributionConfig(pct(100), ZERO, ZERO, ZERO, ZERO, ZERO),
        RewardDistributionConfig(ZERO, pct(100), ZERO, ZERO, ZERO, ZERO),
        RewardDistributionConfig(ZERO, ZERO, ZERO, ZERO, pct(100), pct(13)),
        RewardDistributionConfig(pct(3), pct(14), pct(18), pct(31), pct(34), ZERO),
    ],
)
def test_reward_distribution_config_is_consistent(config):
    assert config.is_consistent() is True


@pytest.mark.parametrize(
    "config",
    [
        RewardDistributionConfig(base_treasury_percent=pct(100)),
        RewardDistributionConfig(adjustable_percent=pct(100)),
        RewardDistributionConfig(pct(10), pct(20), pct(20), pct(30), pct(19), ZERO),
        RewardDistributionConfig(pct(10), pct(20), pct(20), pct(31), pct(20), ZERO),
    ],
)
def test_reward_distribution_config_not_consistent(config):
    assert config.is_consistent() is False


def test_set_configuration_fails(chain):
    _, pallet = chain
    with pytest.raises(BadOrigin):
        pallet.set_configuration(Origin.signed(1), RewardDistributionConfig())

    config = RewardDistributionConfig(base_treasury_percent=pct(100))
    assert not config.is_consistent()
    with pytest.raises(InvalidDistributionConfiguration):
        pallet.set_configuration(Origin.root(), config)
    assert pallet.reward_config == RewardDistributionConfig()
    assert pallet.events == []


def test_set_configuration_is_ok(chain):
    _, pallet = chain
    config = RewardDistributionConfig(pct(3), pct(14), pct(18), pct(31), pct(34), pct(87))
    assert config.is_consistent()
    pallet.set_configuration(Origin.root(), config)
    assert pallet.events[-1] == DistributionConfigurationChanged(config)
    assert pallet.reward_config == config


def test_inconsistent_genesis_config_is_rejected():
    currency = Balances(EXISTENTIAL_DEPOSIT, [(1, 100)])
    payout = BeneficiaryPayout(currency, TREASURY_POT, COLLATOR_POT, STAKERS_POT, DAPPS_POT)
    with pytest.raises(ValueError):
        BlockReward(currency, lambda: TVL, payout, BLOCK_REWARD,
                    RewardDistributionConfig(adjustable_percent=pct(100)))


def test_inflation_and_total_issuance_as_expected(chain):
    currency, pallet = chain
    init_issuance = currency.total_issuance()
    assert init_issuance == 19800
    for block in range(10):
        assert currency.total_issuance() == block * BLOCK_REWARD + init_issuance
        pallet.on_timestamp_set(0)
        assert currency.total_issuance() == (block + 1) * BLOCK_REWARD + init_issuance


def test_default_config_distribution_values(chain):
    currency, pallet = chain
    pallet.on_timestamp_set(0)
    assert FreeBalanceSnapshot.take(currency) == FreeBalanceSnapshot(
        treasury=400_000, collators=100_000, stakers=250_000, dapps=250_000
    )


def test_reward_distribution_as_expected(chain):
    currency, pallet = chain
    assert FreeBalanceSnapshot.take(currency).is_zero()

    config = RewardDistributionConfig(pct(10), pct(20), pct(25), pct(5), pct(40), pct(50))
    assert config.is_consistent()
    pallet.set_configuration(Origin.root(), config)

    adjust_tvl_percentage(currency, pct(30))

    for _ in range(100):
        before = FreeBalanceSnapshot.take(currency)
        rewards = Rewards.calculate(currency, config)
        pallet.on_timestamp_set(0)
        before.assert_distribution(FreeBalanceSnapshot.take(currency), rewards)


def test_reward_distribution_no_adjustable_part(chain):
    currency, pallet = chain
    config = RewardDistributionConfig(pct(10), pct(45), pct(40), pct(5), ZERO, pct(50))
    assert config.is_consistent()
    pallet.set_configuration(Origin.root(), config)

    const_rewards = Rewards.calculate(currency, config)
    for _ in range(100):
        before = FreeBalanceSnapshot.take(currency)
        rewards = Rewards.calculate(currency, config)
        assert rewards == const_rewards
        pallet.on_timestamp_set(0)
        before.assert_distribution(FreeBalanceSnapshot.take(currency), rewards)


def test_reward_distribution_all_zero_except_one(chain):
    currency, pallet = chain
    config = RewardDistributionConfig(ZERO, ZERO, ZERO, ZERO, Perbill.one(), pct(50))
    assert config.is_consistent()
    pallet.set_configuration(Origin.root(), config)

    for _ in range(10):
        before = FreeBalanceSnapshot.take(currency)
        rewards = Rewards.calculate(currency, config)
        pallet.on_timestamp_set(0)
        before.assert_distribution(FreeBalanceSnapshot.take(currency), rewards)
    assert currency.free_balance(STAKERS_POT) == 10 * BLOCK_REWARD


def test_tvl_percentage_with_zero_issuance():
    currency = Balances(EXISTENTIAL_DEPOSIT)
    payout = BeneficiaryPayout(currency, TREASURY_POT, COLLATOR_POT, STAKERS_POT, DAPPS_POT)
    pallet = BlockReward(currency, lambda: TVL, payout, BLOCK_REWARD)
    assert pallet.tvl_percentage() == Perbill.zero()


def test_tvl_percentage_ratio(chain):
    currency, pallet = chain
    adjust_tvl_percentage(currency, pct(30))
    assert pallet.tvl_percentage() == Perbill.from_rational(TVL, currency.total_issuance())
    assert pct(29) < pallet.tvl_percentage() <= pct(30)


def test_config_replace_keeps_other_fields():
    config = replace(RewardDistributionConfig(), ideal_dapps_staking_tvl=pct(60))
    assert config.base_treasury_percent == pct(40)
    assert config.is_consistent() is True