"""Storage adapters implementing core ports."""

from nixmcp.adapters.storage.ring_buffer import RingBufferLogStorage, utc_timestamp

__all__ = [
    "RingBufferLogStorage",
    "utc_timestamp",
]
