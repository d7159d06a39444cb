"""Process-level wiring of the curation pipelines."""

from .orchestrator import PipelineOrchestrator

__all__ = ["PipelineOrchestrator"]
