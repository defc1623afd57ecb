"""Cooperative caching simulator.

Client nodes with small local caches cooperate through a coordinator that
owns a larger cache and the authoritative disk. Requests are charged in
abstract cost units so policies can be compared on cost and hit ratios.
"""

from coopcache.environment.accounting import RequestRecord, Response
from coopcache.environment.client import AgingClient, CachingClient
from coopcache.environment.server import CachingServer
from coopcache.storage.block import Block, content_id

__version__ = "0.1"

__all__ = [
    "AgingClient",
    "Block",
    "CachingClient",
    "CachingServer",
    "RequestRecord",
    "Response",
    "content_id",
]
