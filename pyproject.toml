[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "palletkit"
version = "0.1.0"
description = "In-memory block reward distribution, balances, dApps staking records and Ethereum-style signatures for blockchain runtimes"
requires-python = ">=3.10"
keywords = ["blockchain", "staking", "block-reward", "perbill", "balances", "ethereum-signature"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: System :: Distributed Computing",
]
dependencies = [
    "pycryptodome",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["palletkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
