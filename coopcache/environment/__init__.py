from coopcache.environment.accounting import RequestRecord, Response
from coopcache.environment.aging import MAX_COUNT, MIN_COUNT, AgingCounters
from coopcache.environment.client import AgingClient, CachingClient
from coopcache.environment.server import CachingServer

__all__ = [
    "AgingClient",
    "AgingCounters",
    "CachingClient",
    "CachingServer",
    "MAX_COUNT",
    "MIN_COUNT",
    "RequestRecord",
    "Response",
]
