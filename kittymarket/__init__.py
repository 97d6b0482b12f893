"""An in-memory marketplace for collectible kitties, with a native balance ledger."""

__version__ = "0.1.0"
__all__ = ["chain", "kitties"]