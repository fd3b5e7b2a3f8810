"""
Stage progress bands and time estimates.

Each active stage owns a slice of the 0-100 overall range,
proportional to its estimated duration.

Dependencies: edu_rag.models.processing
System role: Progress arithmetic for the processing state machine
"""

from edu_rag.models.processing import ACTIVE_STAGES, ProcessingStatus


class StageBands:
    """Overall-progress bands derived from per-stage duration estimates."""

    def __init__(self, stage_durations: dict[str, float]) -> None:
        """
        Build bands from durations.

        Args:
            stage_durations: Estimated seconds per active stage keyed by status value
        """
        self.durations = {stage: float(stage_durations[stage.value]) for stage in ACTIVE_STAGES}
        total = sum(self.durations.values())

        self.bands: dict[ProcessingStatus, tuple[float, float]] = {}
        start = 0.0
        for stage in ACTIVE_STAGES:
            width = 100.0 * self.durations[stage] / total
            self.bands[stage] = (start, start + width)
            start += width
        # Pin the last band to exactly 100 despite float accumulation
        last = ACTIVE_STAGES[-1]
        self.bands[last] = (self.bands[last][0], 100.0)

    def overall_progress(self, status: ProcessingStatus, stage_progress: float) -> float:
        """Map progress within a stage onto the overall 0-100 range."""
        if status == ProcessingStatus.COMPLETED:
            return 100.0
        start, end = self.bands[status]
        return start + (end - start) * stage_progress / 100.0

    def stage_for_progress(self, progress: float) -> ProcessingStatus:
        """Return the active stage whose band contains an overall progress value."""
        for stage in ACTIVE_STAGES:
            _, end = self.bands[stage]
            if progress < end:
                return stage
        return ACTIVE_STAGES[-1]

    def stage_progress_for(self, status: ProcessingStatus, progress: float) -> float:
        start, end = self.bands[status]
        fraction = (progress - start) / (end - start)
        return max(0.0, min(100.0, fraction * 100.0))

    def estimate_time_remaining(self, status: ProcessingStatus, stage_progress: float) -> float:
        """
        Estimate seconds until completion.

        Remaining share of the current stage plus the full duration of
        every later stage. Terminal states report 0.
        """
        if status.is_terminal:
            return 0.0
        index = ACTIVE_STAGES.index(status)
        remaining = self.durations[status] * (1.0 - stage_progress / 100.0)
        for later in ACTIVE_STAGES[index + 1:]:
            remaining += self.durations[later]
        return remaining


def next_stage(status: ProcessingStatus) -> ProcessingStatus:
    """Return the stage that follows an active stage."""
    index = ACTIVE_STAGES.index(status)
    if index + 1 < len(ACTIVE_STAGES):
        return ACTIVE_STAGES[index + 1]
    return ProcessingStatus.COMPLETED
