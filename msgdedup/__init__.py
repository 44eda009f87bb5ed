"""msgdedup.

A bounded, time-expiring deduplication cache for at-least-once message
channels. Transports call it before dispatching a message so that
redelivered messages (for example after a websocket reconnect) are not
handled twice.

Features:
- Insertion-ordered index with FIFO eviction at a fixed capacity
- Lazy, throttled TTL sweep
- Debounced JSON snapshot persistence with atomic replace
- Environment-based configuration with Pydantic validation
"""

__version__ = "0.1.0"
__license__ = "MIT"
