"""
Event change reconciler: keeps label time buckets in sync with events.

Only completed events count as tracked time. The plan for a change depends
solely on (was_completed, is_completed):

    was    is     plan
    False  False  ()                  nothing to do, no store access
    False  True   (APPLY,)            add the new state
    True   False  (REVERT,)           remove the old state
    True   True   (REVERT, APPLY)     always both, even if nothing changed

The last row never diffs before/after: removing the old contribution and
adding the new one is correct for any combination of label, time and
duration edits.
"""
from __future__ import annotations

import logging
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from labeltime.application.time_buckets import BucketAdjuster, compute_deltas
from labeltime.domain.event_change import EventChange
from labeltime.infrastructure.buckets.repository import LabelRepository

logger = logging.getLogger(__name__)

STEP_APPLY = "apply"
STEP_REVERT = "revert"

RECONCILE_PLAN: dict[tuple[bool, bool], tuple[str, ...]] = {
    (False, False): (),
    (False, True): (STEP_APPLY,),
    (True, False): (STEP_REVERT,),
    (True, True): (STEP_REVERT, STEP_APPLY),
}


class IncompleteEventChangeError(ValueError):
    pass


def plan_for(change: EventChange) -> tuple[str, ...]:
    return RECONCILE_PLAN[(bool(change.was_completed), bool(change.is_completed))]


class ChangeReconciler:
    def __init__(
        self,
        db: Session,
        adjuster: BucketAdjuster | None = None,
        label_repo: LabelRepository | None = None,
    ):
        self.db = db
        self.label_repo = label_repo or LabelRepository(db)
        self.adjuster = adjuster or BucketAdjuster(db, label_repo=self.label_repo)

    def handle_event_change(self, change: EventChange) -> tuple[str, ...]:
        """
        Revert / apply bucket minutes for one event change.

        All label lookups and delta computations happen before the first
        write, so a missing label aborts with no bucket touched.

        Returns:
            the executed plan, e.g. ("revert", "apply")

        Raises:
            LabelNotFoundError: a touched label does not exist
            IncompleteEventChangeError: a required label id / interval is missing
        """
        plan = plan_for(change)
        logger.debug(
            "Event change: user=%s was_completed=%s is_completed=%s plan=%s",
            change.owner_id, change.was_completed, change.is_completed, plan,
        )
        if not plan:
            return plan

        tz = ZoneInfo(change.timezone)
        steps = [self._prepare_step(step, change, tz) for step in plan]
        # zero-length intervals write nothing and need no label
        steps = [s for s in steps if s[2]]

        label_names: dict[int, str] = {}
        for _, label_id, _ in steps:
            if label_id not in label_names:
                label_names[label_id] = self.label_repo.get_label(label_id).name

        for step, label_id, deltas in steps:
            if step == STEP_REVERT:
                self.adjuster.revert(change.owner_id, label_id, deltas, label_names[label_id])
            else:
                self.adjuster.apply(change.owner_id, label_id, deltas, label_names[label_id])

        if plan == (STEP_REVERT, STEP_APPLY):
            logger.info(
                "Event change re-applied: user=%s old_label=%s new_label=%s",
                change.owner_id, change.old_label_id, change.new_label_id,
            )
        return plan

    @staticmethod
    def _prepare_step(step: str, change: EventChange, tz: ZoneInfo):
        if step == STEP_REVERT:
            label_id, interval, side = change.old_label_id, change.old_interval, "old"
        else:
            label_id, interval, side = change.new_label_id, change.new_interval, "new"
        if label_id is None or interval is None:
            raise IncompleteEventChangeError(f"{side} label and interval are required for {step}")
        return step, label_id, compute_deltas(interval, tz)
