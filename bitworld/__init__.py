"""In-memory ledgers for social currencies, NFT collections and a number oracle."""

__version__ = "0.1.0"

__all__ = ["currency", "nft", "oracle", "primitives"]