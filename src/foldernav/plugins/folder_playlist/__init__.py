"""Folder playlist plugin: play every media file next to the open one."""

from .plugin import Plugin  # noqa: F401

__all__ = ["Plugin"]
