"""
Indexer backend implementations.

Available backends:
- InsightBackend: Insight API over HTTP (balance, UTXOs, history)
"""

from ltcpay.backends.base import IndexerBackend
from ltcpay.backends.insight import InsightBackend

__all__ = [
    "IndexerBackend",
    "InsightBackend",
]
