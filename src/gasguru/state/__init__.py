"""State layer.

:class:`AppState` is the single object mirroring every remote collection.
It is created by the composition root (:class:`gasguru.GuruClient`) and
passed to whoever needs it; there is no module-level instance.
"""

from gasguru.state.snapshot import SnapshotStorage
from gasguru.state.store import AppState

__all__ = ["AppState", "SnapshotStorage"]
