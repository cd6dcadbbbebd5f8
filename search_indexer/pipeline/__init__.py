from search_indexer.pipeline.orchestrator import (
    IndexingPipeline,
    PipelineAction,
    PipelineOutcome,
    PipelineState,
)

__all__ = ["IndexingPipeline", "PipelineAction", "PipelineOutcome", "PipelineState"]
