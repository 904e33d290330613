"""
Milestone Segmenter

Partitions a project's lifespan into ordered, contiguous segments bounded
by milestone due dates:

    [project start .. m1.due] [m1.due + 1 .. m2.due] ... [mN.due + 1 .. end]

Each milestone segment carries the milestone's allocation. The trailing
segment has no milestone and carries whatever budget remains (never
negative); it is the auto-estimate fallback. Recurring templates are
expanded first and each occurrence bounds its own segment.

Segments always tile [project start, effective end]: every segment starts
the day after its predecessor ends. A segment whose end precedes its start
is empty (two milestones due on the same day, or a last milestone due on
the final day).
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, List, Optional, Tuple

from planline.platform.config import settings as app_settings
from planline.platform.logging import get_logger

from .recurrence import MilestoneOccurrence, RecurrenceConfigError, RecurrenceExpander
from .schemas import Milestone, Project

logger = get_logger(__name__)

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class Segment:
    """A contiguous, inclusive date range carrying a fixed hour allocation."""

    start_date: date
    end_date: date
    allocated_hours: float
    milestone_id: Optional[str] = None  # None for the trailing auto-estimate segment
    occurrence_number: Optional[int] = None

    # Filled in by the allocator
    working_day_count: int = 0
    hours_per_working_day: float = 0.0

    @property
    def is_auto_estimate(self) -> bool:
        return self.milestone_id is None

    @property
    def is_empty(self) -> bool:
        return self.end_date < self.start_date

    @property
    def day_count(self) -> int:
        return max(0, (self.end_date - self.start_date).days + 1)

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def overlaps(self, start: date, end: date) -> bool:
        return not self.is_empty and self.start_date <= end and start <= self.end_date


@dataclass
class SegmentationResult:
    """Ordered segments for one project plus what went into them."""

    project_id: str
    segments: List[Segment]
    effective_end: date
    milestone_hours: float
    occurrences: List[MilestoneOccurrence] = field(default_factory=list)
    skipped_milestone_ids: List[str] = field(default_factory=list)

    @property
    def trailing_segment(self) -> Segment:
        return self.segments[-1]

    @property
    def milestone_segments(self) -> List[Segment]:
        return self.segments[:-1]

    @property
    def total_allocated_hours(self) -> float:
        return sum(segment.allocated_hours for segment in self.segments)


class MilestoneSegmenter:
    """Builds the segment partition for a project."""

    def __init__(
        self,
        expander: Optional[RecurrenceExpander] = None,
        tolerance: Optional[float] = None,
    ):
        self.expander = expander or RecurrenceExpander()
        self.tolerance = tolerance if tolerance is not None else app_settings.HOURS_TOLERANCE

    def expand_milestones(
        self,
        project: Project,
        milestones: Iterable[Milestone],
    ) -> Tuple[List[MilestoneOccurrence], List[str]]:
        """
        Concrete milestone instances sorted by due date, plus the ids of
        recurring templates that could not be expanded.

        Sorting is stable, so milestones due on the same day keep their
        input order.
        """
        occurrences: List[MilestoneOccurrence] = []
        skipped: List[str] = []

        for milestone in milestones:
            if milestone.project_id != project.id:
                continue
            try:
                occurrences.extend(self.expander.expand(milestone, project))
            except RecurrenceConfigError as e:
                logger.warning(
                    "Skipping recurring milestone with invalid pattern",
                    project_id=project.id,
                    milestone_id=milestone.id,
                    errors=e.errors,
                )
                skipped.append(milestone.id)

        occurrences.sort(key=lambda occurrence: occurrence.due_date)
        return occurrences, skipped

    def segment(self, project: Project, milestones: Iterable[Milestone]) -> SegmentationResult:
        """
        Partition the project lifespan.

        Args:
            project: Project whose lifespan is partitioned
            milestones: Milestone rows; rows of other projects are ignored

        Returns:
            SegmentationResult whose last segment is the auto-estimate segment
        """
        occurrences, skipped = self.expand_milestones(project, milestones)

        start = project.start_date
        # Guard against an end date before the start
        effective_end = max(self.expander.horizon_end(project), start - ONE_DAY)

        segments: List[Segment] = []
        cursor = start
        milestone_hours = 0.0

        for occurrence in occurrences:
            if not start <= occurrence.due_date <= effective_end:
                logger.warning(
                    "Milestone due date outside project lifespan",
                    project_id=project.id,
                    milestone_id=occurrence.milestone_id,
                    due_date=occurrence.due_date.isoformat(),
                )

            # Clamp the boundary so segments keep tiling the lifespan
            end = max(cursor - ONE_DAY, min(occurrence.due_date, effective_end))
            segments.append(
                Segment(
                    start_date=cursor,
                    end_date=end,
                    allocated_hours=occurrence.time_allocation_hours,
                    milestone_id=occurrence.milestone_id,
                    occurrence_number=occurrence.occurrence_number,
                )
            )
            milestone_hours += occurrence.time_allocation_hours
            cursor = end + ONE_DAY

        remaining = project.estimated_hours - milestone_hours
        if remaining < -self.tolerance:
            logger.warning(
                "Milestone allocations exceed project budget",
                project_id=project.id,
                estimated_hours=project.estimated_hours,
                milestone_hours=milestone_hours,
            )

        segments.append(
            Segment(
                start_date=cursor,
                end_date=effective_end,
                allocated_hours=max(0.0, remaining),
            )
        )

        logger.debug(
            "Segmented project",
            project_id=project.id,
            segments=len(segments),
            occurrences=len(occurrences),
            skipped=len(skipped),
        )

        return SegmentationResult(
            project_id=project.id,
            segments=segments,
            effective_end=effective_end,
            milestone_hours=milestone_hours,
            occurrences=occurrences,
            skipped_milestone_ids=skipped,
        )
