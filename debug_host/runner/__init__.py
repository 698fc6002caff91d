"""Adapter process sessions and output capture."""

from .output_log import AdapterLog, OutputChunk
from .process import AdapterTransport, OutputObserver, ProcessSession, ProcessSessionFactory

__all__ = [
    "AdapterTransport",
    "OutputChunk",
    "AdapterLog",
    "OutputObserver",
    "ProcessSession",
    "ProcessSessionFactory",
]
