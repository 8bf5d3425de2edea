"""Pipeline orchestration for lineup sync runs."""

from src.pipeline.orchestrator import LineupSyncPipeline

__all__ = ["LineupSyncPipeline"]
