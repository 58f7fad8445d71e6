"""Refresh cycle components."""

from country_cache.services.refresh.pipeline import RefreshPipeline, RefreshResult, RefreshStage

__all__ = ["RefreshPipeline", "RefreshResult", "RefreshStage"]
