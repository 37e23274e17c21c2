"""
Model sinks for CityJSON Mesher.

Provides the sink interface the converter writes to, and an in-memory
implementation used by the CLI and the OBJ exporter.
"""

from .base import IModelSink
from .memory import MemoryModelSink

__all__ = [
    'IModelSink',
    'MemoryModelSink',
]
