"""Statement Ledger: bank statement ingestion and classification."""

__version__ = "0.1.0"
