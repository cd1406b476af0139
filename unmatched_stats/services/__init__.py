from .stats_service import StatUpdater

__all__ = ["StatUpdater"]
