"""
Off-chain models. Importing the package registers every mapper so string
relationship targets resolve regardless of which model is used first.
"""

from .base import Base
from .player import Player
from .tank import Tank
from .fish import Fish
from .decoration import Decoration
from .sync_queue import SyncQueueItem

__all__ = ["Base", "Player", "Tank", "Fish", "Decoration", "SyncQueueItem"]
