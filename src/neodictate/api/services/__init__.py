"""API-facing services"""

from .dictate_dispatcher import DictateDispatcher, UpdateTarget, parse_update_path

__all__ = ["DictateDispatcher", "UpdateTarget", "parse_update_path"]
