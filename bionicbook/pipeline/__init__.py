from bionicbook.pipeline.controller import PipelineController, PipelineRun
from bionicbook.pipeline.models import (
    Cancelled,
    Failure,
    PartialSuccess,
    PipelineResult,
    PipelineSnapshot,
    PipelineStatus,
    StageName,
    StageSnapshot,
    StageStatus,
    Success,
)

__all__ = [
    "PipelineController",
    "PipelineRun",
    "Cancelled",
    "Failure",
    "PartialSuccess",
    "PipelineResult",
    "PipelineSnapshot",
    "PipelineStatus",
    "StageName",
    "StageSnapshot",
    "StageStatus",
    "Success",
]
