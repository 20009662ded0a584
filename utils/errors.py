from __future__ import annotations


class RenderError(Exception):
    """Base class for renderer failures reported to the caller."""


class ConfigError(RenderError, ValueError):
    """Invalid viewport or coloring configuration; raised before a session starts."""


class BufferAllocationError(RenderError, MemoryError):
    """The output buffer could not be allocated; no session is created."""
