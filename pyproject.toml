[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vaultworks"
version = "0.1.0"
description = "In-memory ledger with vesting schedules, crowdfunding campaigns, donation badges and bonding-curve market makers"
requires-python = ">=3.10"
dependencies = []
keywords = ["vesting", "bonding curve", "amm", "crowdfunding", "donations", "ledger", "decimal"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["vaultworks"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
