"""Shared type definitions for thoughts."""

from collections.abc import Callable
from typing import Literal

# Opaque token identifying a remote state ("cached-hash" for the disk cache)
type Fingerprint = str

# Routed document path, suffix stripped (e.g. "notes/today")
type RoutePath = str

# One of the two snapshot holders
type SlotName = Literal["A", "B"]

# Lifecycle of a slot
type SlotState = Literal["empty", "building", "ready"]

# Releases whatever a pull holds open; called exactly once
type ReleaseFunc = Callable[[], None]

# Pure raw-bytes -> rendered-bytes document transform
type Transform = Callable[[bytes], bytes]
