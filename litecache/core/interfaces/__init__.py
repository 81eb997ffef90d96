from litecache.core.interfaces.cache import DurableStore, InstanceResolver

__all__ = ["DurableStore", "InstanceResolver"]
