"""payengine: client account ledger for deposit, withdrawal and dispute streams."""

__version__ = "0.1.0"
