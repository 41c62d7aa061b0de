"""
BookmarkHub v1 - Background Task Status

Status records for long-running analysis jobs run elsewhere. This module
only validates and renders them; it never starts a task.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

STAGE_DESCRIPTIONS = {
    "initializing": "Initializing analysis...",
    "collecting": "Collecting bookmark data...",
    "analyzing": "Analyzing content relationships...",
    "generating": "Generating mind map structure...",
    "completed": "Analysis complete",
    "failed": "Analysis failed",
}

UNKNOWN_STAGE_DESCRIPTION = "Processing..."


class TaskStatus(BaseModel):
    """Polling record for a background task"""
    task_id: str = Field(..., alias="taskId", description="Task identifier")
    status: Literal["processing", "completed", "failed"]
    progress: int = Field(default=0, ge=0, le=100, description="Percent complete")
    stage: str = Field(default="initializing", description="Current stage key")
    error: Optional[str] = Field(None, description="Failure reason")

    model_config = ConfigDict(populate_by_name=True)


class ProgressView(BaseModel):
    """What a progress panel shows for a task"""
    headline: str
    description: str
    progress: int
    is_completed: bool
    is_failed: bool
    error: Optional[str] = None


def render_progress(status: TaskStatus) -> ProgressView:
    """Turn a task status into display text"""
    is_completed = status.status == "completed"
    is_failed = status.status == "failed"

    if is_failed:
        headline = "Analysis failed"
    elif is_completed:
        headline = "Analysis complete"
    else:
        headline = "Analyzing bookmark data"

    return ProgressView(
        headline=headline,
        description=STAGE_DESCRIPTIONS.get(status.stage, UNKNOWN_STAGE_DESCRIPTION),
        progress=status.progress,
        is_completed=is_completed,
        is_failed=is_failed,
        error=status.error or ("Unknown error" if is_failed else None),
    )
