"""
Persistence Adapters

Shared key-value storage and the widget handoff built on top of it.
"""

from currex.adapters.persistence.blob_store import FileBlobStore, MemoryBlobStore, SharedBlobStore
from currex.adapters.persistence.widget_store import WidgetRateStore

__all__ = ["SharedBlobStore", "FileBlobStore", "MemoryBlobStore", "WidgetRateStore"]
