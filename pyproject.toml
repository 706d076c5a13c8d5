[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bitworld"
version = "0.1.0"
description = "In-memory ledgers for social currencies, NFT collections and a bounded number oracle"
requires-python = ">=3.10"
dependencies = []
keywords = ["ledger", "nft", "currency", "token", "oracle"]
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
    "Topic :: Office/Business :: Financial",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["bitworld"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
