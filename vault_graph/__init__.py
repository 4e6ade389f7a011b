"""Link graph over a vault of interlinked markdown notes."""

__version__ = "0.1.0"
