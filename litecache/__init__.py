"""litecache - two-tier read-through cache with primary/replica write forwarding."""

__version__ = "1.0.0"
