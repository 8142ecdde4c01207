"""Hot-swap layer — two snapshot slots behind one active selector."""

from thoughts.hotswap.engine import Slot, SyncEngine, SyncResult

__all__ = ["Slot", "SyncEngine", "SyncResult"]
