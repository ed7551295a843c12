# palletkit

In-memory models of blockchain runtime components. Each one keeps its own state in Python
objects and raises an exception when a call is not allowed.

| Module | What it holds |
| --- | --- |
| `palletkit.perbill` | `Perbill`, a fraction in billionths with saturating and checked arithmetic |
| `palletkit.runtime` | `Origin` (root, signed, none), `DispatchError` and `BadOrigin` |
| `palletkit.balances` | `Balances`, free and reserved balances with an existential deposit and total issuance; `Imbalance`; `InsufficientBalance` |
| `palletkit.block_reward` | `BlockReward`, which issues a reward per block and splits it between treasury, collators, stakers and dApps |
| `palletkit.staking` | dApps staking bookkeeping: `StakerInfo`, `UnbondingInfo`, `AccountLedger` and related records |
| `palletkit.weights` | call weight formulas and `DbWeight` |
| `palletkit.ethereum` | `personal_sign` messages, secp256k1 public key recovery and `EthereumSignature` |

## Installation

```
pip install palletkit
```

With the test dependencies:

```
pip install "palletkit[test]"
```

## Fractions

```python
from palletkit.perbill import Perbill

share = Perbill.from_percent(25)
print(share * 1_000_000)                 # 250000
print(Perbill.from_rational(1, 3))       # Perbill(parts=333333333)
print(Perbill.from_percent(60).checked_add(Perbill.from_percent(50)))  # None
```

Multiplying an integer by a `Perbill` rounds to the nearest integer. `from_rational` rounds down
and gives one whole for ratios of one or more and for a zero denominator. Dividing one `Perbill`
by another gives their ratio, saturated at one whole.

## Balances

```python
from palletkit.balances import Balances

currency = Balances(existential_deposit=5, endowed={1: 100, 2: 100})
currency.reserve(1, 10)
print(currency.free_balance(1), currency.reserved_balance(1))   # 90 10
currency.transfer(2, 3, 50, keep_alive=True)
print(currency.free_balance(3))          # 50
print(currency.total_issuance())         # 200
```

`issue` returns an `Imbalance` that already counts in total issuance; hand it to
`resolve_creating` to credit an account. Funds left in an imbalance that is discarded are burned.
An account whose total balance falls below the existential deposit is removed and its dust burned.
`reserve` and `transfer` raise `InsufficientBalance` when the free balance is too small.

## Block reward distribution

```python
from palletkit.balances import Balances
from palletkit.block_reward import BeneficiaryPayout, BlockReward, RewardDistributionConfig
from palletkit.perbill import Perbill
from palletkit.runtime import Origin

currency = Balances(existential_deposit=2, endowed={1: 9000, 2: 800, 3: 10000})
payout = BeneficiaryPayout(currency, "treasury", "collators", "stakers", "dapps")

pallet = BlockReward(
    currency=currency,
    tvl_provider=lambda: 1_000_000_000,
    payout=payout,
    reward_amount=1_000_000,
)

pallet.set_configuration(Origin.root(), RewardDistributionConfig(
    base_treasury_percent=Perbill.from_percent(10),
    base_staker_percent=Perbill.from_percent(20),
    dapps_percent=Perbill.from_percent(25),
    collators_percent=Perbill.from_percent(5),
    adjustable_percent=Perbill.from_percent(40),
    ideal_dapps_staking_tvl=Perbill.from_percent(50),
))
pallet.on_timestamp_set(0)
print(currency.free_balance("dapps"))    # 250000
print(pallet.events[-1])                 # DistributionConfigurationChanged(...)
```

The shares of a configuration, leaving out `ideal_dapps_staking_tvl`, must add up to exactly one
whole; otherwise `set_configuration` raises `InvalidDistributionConfiguration`. A call from an
origin other than root raises `BadOrigin`. The adjustable share goes to the stakers in proportion
to `tvl_percentage()` against the ideal TVL, the rest of it to the treasury; with an ideal TVL of
zero it all goes to the stakers. The default `RewardDistributionConfig` gives 40% to the treasury,
25% to stakers, 25% to dApps and 10% to collators.

Any object with `treasury`, `collators` and `dapps_staking` methods can be used as `payout`.

## dApps staking records

```python
from palletkit.staking import StakerInfo, UnbondingInfo, UnlockingChunk

info = StakerInfo()
info.stake(5, 1000)
info.stake(7, 300)
print(info.claim())                      # (5, 1000)
print(info.latest_staked_value())        # 1300

unbonding = UnbondingInfo()
unbonding.add(UnlockingChunk(amount=100, unlock_era=8))
unbonding.add(UnlockingChunk(amount=50, unlock_era=8))
unbonding.add(UnlockingChunk(amount=20, unlock_era=12))
ready, pending = unbonding.partition(10)
print(ready.sum(), pending.sum())        # 150 20
```

`stake` and `unstake` raise `ValueError` for an era before the latest recorded one.

## Weights

```python
from palletkit import weights

print(weights.set_configuration())       # 100000000
print(weights.register_as_candidate(3))  # 371790000
```

Each function takes an optional `DbWeight`; the default costs 25,000,000 per read and
100,000,000 per write. Results saturate at the 64-bit maximum.

## Ethereum signatures

```python
from palletkit.ethereum import EthereumSignature, signable_message

print(signable_message(b"hello")[:28])   # b'\x19Ethereum Signed Message:\n32'
signature = EthereumSignature.from_bytes(bytes(65))
print(signature.verify(b"hello", bytes(32)))   # False
```

`verify(message, account)` hashes the signable message with Keccak-256, recovers the compressed
public key and returns `True` only if its BLAKE2b-256 hash equals `account`.
`recover_compressed`, `public_from_secret` and `account_from_public` are available on their own.

## What it does not do

Everything lives in memory: there is no storage, no network, no block production and no command
line. The staking module holds the bookkeeping records only; there is no staking pallet that
registers contracts or pays out era rewards. Collator candidate management is not included, though
`palletkit.weights` has the weight formulas for its calls.

## Running the tests

```
pytest
```