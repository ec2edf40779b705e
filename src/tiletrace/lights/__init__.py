"""Light sources."""

from .point import Light, illuminate, is_occluded, occluded

__all__ = ["Light", "is_occluded", "occluded", "illuminate"]
