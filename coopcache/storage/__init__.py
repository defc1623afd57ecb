from coopcache.storage.block import Block, content_id
from coopcache.storage.slots import SlotStore

__all__ = ["Block", "SlotStore", "content_id"]
