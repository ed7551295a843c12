"""In-memory runtime components: Perbill fractions, balances, block rewards, dApps staking records, call weights and Ethereum-style signatures."""

__version__ = "0.1.0"