from litecache.infrastructure.instances.litefs import LiteFSInstanceDirectory

__all__ = ["LiteFSInstanceDirectory"]
