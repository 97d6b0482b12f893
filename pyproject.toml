[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kittymarket"
version = "0.1.0"
description = "An in-memory simulated marketplace for collectible kitties: minting, transfers, pricing and sales against a native balance ledger"
requires-python = ">=3.10"
dependencies = []
keywords = ["marketplace", "simulation", "collectibles", "ledger", "kitties"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["kittymarket"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
