"""
Optimistic write-through between the in-memory horizon and the store.

Every operation updates the in-memory horizon first and returns the
result; the matching store writes are issued afterwards.  A failed write
is logged and otherwise ignored: memory is not rolled back, so the next
load may briefly show the stale stored state.

Writes run inline unless an Executor is supplied, in which case they are
submitted to it and the caller is not blocked.  Submitted writes carry a
copy of the plans as they were at submit time and are applied one at a
time in submission order.  Any other exception raised by a submitted
write is logged at ERROR.  Call flush() to wait for submitted writes.
"""

import copy
import logging
import random
import threading
import uuid
from collections import deque
from concurrent.futures import Executor, Future, wait
from datetime import datetime
from typing import Callable

from ..core.catalog import Catalogs
from ..core.config import DEFAULT_SETTINGS, SchedulerSettings
from ..core.horizon import HorizonUpdate, manage_horizon, regenerate_full_horizon
from ..core.models import DayPlan, ExerciseDefinition, JobLogEntry, SessionKind, UserProfile
from ..core.tracker import (
    ExerciseNotFound,
    find_day,
    record_completion,
    replacement_options,
    substitute_exercise,
)
from .horizon_store import HorizonStore, StoreError

logger = logging.getLogger(__name__)


class ProfileMissing(LookupError):
    """Raised when an operation needs a profile the store does not have."""


class ScheduleSync:
    """
    In-memory horizon for one user, kept in step with a HorizonStore.

    Args:
        store: Backing store
        user_id: Owner of the horizon
        catalogs: Normalized facility and home pools
        settings: Selection and horizon tunables
        rng: Random source for generation (seed it for reproducible plans)
        executor: Optional executor for non-blocking writes
    """

    def __init__(
        self,
        store: HorizonStore,
        user_id: str,
        catalogs: Catalogs,
        settings: SchedulerSettings = DEFAULT_SETTINGS,
        rng: random.Random | None = None,
        executor: Executor | None = None,
    ):
        self.store = store
        self.user_id = user_id
        self.catalogs = catalogs
        self.settings = settings
        self.rng = rng or random.Random()
        self.executor = executor
        self.profile: UserProfile | None = None
        self.plans: list[DayPlan] = []
        self._pending: list[Future] = []
        self._queue: deque = deque()
        self._queue_lock = threading.RLock()
        self._write_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> list[DayPlan]:
        """
        Read the profile and live plans from the store.

        Raises:
            StoreError: If the store cannot be read
        """
        self.profile = self.store.load_profile(self.user_id)
        self.plans = self.store.list_plans(self.user_id)
        return self.plans

    def _require_profile(self) -> UserProfile:
        if self.profile is None:
            raise ProfileMissing(f"No profile for user {self.user_id!r}. Run 'init' first.")
        return self.profile

    # ------------------------------------------------------------------
    # Horizon operations
    # ------------------------------------------------------------------

    def manage(self, today: str) -> HorizonUpdate:
        """Archive elapsed days and extend the horizon if it is short."""
        profile = self._require_profile()
        return self._run_generation(
            "manage",
            lambda: manage_horizon(
                profile,
                self.plans,
                today,
                self.catalogs.facility,
                self.catalogs.home,
                rng=self.rng,
                settings=self.settings,
            ),
        )

    def regenerate(self, today: str) -> HorizonUpdate:
        """Discard the active horizon and start over at day 1 today."""
        profile = self._require_profile()
        return self._run_generation(
            "regenerate",
            lambda: regenerate_full_horizon(
                profile,
                self.plans,
                today,
                self.catalogs.facility,
                self.catalogs.home,
                rng=self.rng,
                settings=self.settings,
            ),
        )

    def _run_generation(self, name: str, run: Callable[[], HorizonUpdate]) -> HorizonUpdate:
        try:
            update = run()
        except ValueError as e:
            logger.exception("%s failed for user %s", name, self.user_id)
            self._submit(f"{name} job log", self.store.insert_job_log, self._job("failed", name, str(e)))
            return HorizonUpdate(active=list(self.plans))

        self.plans = update.active
        self._submit(f"{name} writes", self._apply, update)
        return update

    def _apply(self, update: HorizonUpdate) -> None:
        """Issue the store writes for one horizon update, in order."""
        archived_ok = True
        if update.archived:
            archived_ok = self._guarded(
                "history insert", self.store.insert_history, self.user_id, update.archived
            )

        archived_dates = {r.date for r in update.archived}
        deletable = [
            p.plan_id for p in update.deleted
            if p.plan_id is not None and (archived_ok or p.date not in archived_dates)
        ]
        if deletable:
            self._guarded("plan delete", self.store.delete_plans, self.user_id, deletable)

        if update.upserts:
            self._guarded("plan upsert", self.store.upsert_plans, self.user_id, update.upserts)

        if update.label is not None:
            self._guarded("job log", self.store.insert_job_log, self._job("success", update.label))

    # ------------------------------------------------------------------
    # Tracking
    # ------------------------------------------------------------------

    def day(self, day_number: int) -> DayPlan:
        """Return a plan from the in-memory horizon."""
        return find_day(self.plans, day_number)

    def complete(
        self,
        day_number: int,
        kind: SessionKind,
        instance_id: str,
        completed_sets: int | None = None,
        measured_kcal: float | None = None,
    ) -> DayPlan:
        """Record completion on one exercise and persist the day."""
        plan = record_completion(
            self.day(day_number), kind, instance_id, completed_sets, measured_kcal
        )
        self._submit("plan update", self.store.upsert_plans, self.user_id, [plan])
        return plan

    def options(self, day_number: int, kind: SessionKind, instance_id: str) -> list[ExerciseDefinition]:
        """Replacement candidates for one exercise."""
        return replacement_options(
            self.day(day_number), kind, instance_id, self.catalogs.pool(kind)
        )

    def substitute(
        self,
        day_number: int,
        kind: SessionKind,
        instance_id: str,
        replacement_name: str,
    ) -> DayPlan:
        """
        Swap one exercise for a catalog exercise of the same pool.

        Raises:
            ExerciseNotFound: If the replacement name is not in the pool
        """
        profile = self._require_profile()
        replacement = self.catalogs.find(kind, replacement_name)
        if replacement is None:
            raise ExerciseNotFound(f"No {kind} exercise named {replacement_name!r}")
        plan = substitute_exercise(
            self.day(day_number), kind, instance_id, replacement, profile.weight_kg
        )
        self._submit("plan update", self.store.upsert_plans, self.user_id, [plan])
        return plan

    # ------------------------------------------------------------------
    # Write dispatch
    # ------------------------------------------------------------------

    def _job(self, status: str, label: str, error: str | None = None) -> JobLogEntry:
        return JobLogEntry(
            user_id=self.user_id,
            status=status,  # type: ignore[arg-type]
            label=label,
            created_at=datetime.now().isoformat(timespec="seconds"),
            error_message=error,
        )

    def _guarded(self, description: str, fn: Callable, *args) -> bool:
        try:
            fn(*args)
        except StoreError as e:
            logger.warning("%s failed for user %s: %s", description, self.user_id, e)
            return False
        return True

    def _submit(self, description: str, fn: Callable, *args) -> None:
        if self.executor is None:
            self._guarded(description, fn, *args)
            return

        # Workers get their own copy; memory keeps changing after submit
        for plan in self.plans:
            if plan.plan_id is None:
                plan.plan_id = uuid.uuid4().hex
        with self._queue_lock:
            self._queue.append((description, fn, copy.deepcopy(args)))
            future = self.executor.submit(self._run_next)
            future.add_done_callback(self._log_worker_failure)
            self._pending.append(future)

    def _run_next(self) -> None:
        # Each task runs the oldest queued write, so writes land in submission order
        with self._write_lock:
            with self._queue_lock:
                description, fn, args = self._queue.popleft()
            self._guarded(description, fn, *args)

    def _log_worker_failure(self, future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error(
                "background write failed for user %s",
                self.user_id,
                exc_info=(type(error), error, error.__traceback__),
            )

    def flush(self) -> None:
        """Wait for all submitted writes to finish."""
        with self._queue_lock:
            pending = list(self._pending)
            self._pending.clear()
        if pending:
            wait(pending)
