"""
Exception types for the reflection sandbox engine.

Every fault in the engine is locally recoverable: callers catch these,
log them and fall back to partial output for the affected room or path.
"""


class SandboxError(Exception):
    pass


class BrokenAncestryError(SandboxError):
    """A room's declared parent cannot be found in the room tree."""

    def __init__(self, room_id: str, parent_id=None):
        self.room_id = room_id
        self.parent_id = parent_id
        if parent_id is None:
            message = f"Room {room_id} has incomplete ancestry (no parent or reflection wall)"
        else:
            message = f"Room {room_id} references missing parent {parent_id}"
        super().__init__(message)


class ConfigurationError(SandboxError, ValueError):
    pass
