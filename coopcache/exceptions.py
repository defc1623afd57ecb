class CoopCacheError(Exception):
    """Base class for simulator errors."""


class InvalidConfigurationError(CoopCacheError, ValueError):
    """A node was constructed with an unusable capacity or cost."""


class NotRegisteredError(CoopCacheError):
    """The coordinator was asked to route before its roster was set."""


class NotWarmedUpError(CoopCacheError):
    """A request reached a cache that has not been warmed up."""


class BlockNotFoundError(CoopCacheError, KeyError):
    """The disk has no block for the requested value."""
