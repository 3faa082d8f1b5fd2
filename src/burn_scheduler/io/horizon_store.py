"""
File-backed storage for profiles, day plans, history, and job logs.

Layout of the data directory (default ``~/.burn-scheduler/``):

- ``profiles.json``: {user_id: profile dict}
- ``plans.json``   : list of live day-plan rows, unique per (user_id, date)
- ``history.jsonl``: one archived day per line
- ``jobs.jsonl``   : one generation-run outcome per line
"""

import json
import os
import tempfile
import threading
import uuid
from pathlib import Path
from typing import Any

from ..core.models import DayPlan, HistoryRecord, JobLogEntry, UserProfile
from .serializers import (
    ValidationError,
    day_plan_to_dict,
    dict_to_day_plan,
    dict_to_history_record,
    dict_to_user_profile,
    history_record_to_dict,
    job_log_to_dict,
    to_json_line,
    user_profile_to_dict,
)


class StoreError(Exception):
    """Raised when the store cannot be read or written."""


class HorizonStore:
    """
    Manages one data directory shared by any number of users.

    Plans are keyed by (user_id, date) for upsert: writing a plan for a
    date that already has a row updates that row in place and keeps its
    plan_id, so repeated writes never duplicate a date.

    Every read-modify-write of a JSON file holds the store lock, so one
    store instance can be shared by writer threads.
    """

    def __init__(self, data_dir: str | Path):
        """
        Initialize the store.

        Args:
            data_dir: Directory holding the store files
        """
        self.data_dir = Path(data_dir)
        self.profiles_path = self.data_dir / "profiles.json"
        self.plans_path = self.data_dir / "plans.json"
        self.history_path = self.data_dir / "history.jsonl"
        self.jobs_path = self.data_dir / "jobs.jsonl"
        self._lock = threading.RLock()

    def exists(self) -> bool:
        """Check if the data directory has been initialized."""
        return self.profiles_path.exists()

    def init(self) -> None:
        """
        Create the data directory and empty files if missing.
        """
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with self._lock:
                if not self.profiles_path.exists():
                    self._write_json(self.profiles_path, {})
                if not self.plans_path.exists():
                    self._write_json(self.plans_path, [])
                for path in (self.history_path, self.jobs_path):
                    if not path.exists():
                        path.touch()
        except OSError as e:
            raise StoreError(f"Cannot initialize {self.data_dir}: {e}") from e

    # ------------------------------------------------------------------
    # Low-level file helpers
    # ------------------------------------------------------------------

    def _read_json(self, path: Path, default: Any) -> Any:
        if not path.exists():
            return default
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Cannot read {path}: {e}") from e

    def _write_json(self, path: Path, data: Any) -> None:
        # Replaced atomically; readers never see a partial file
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=path.parent,
                prefix=path.name + ".",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                json.dump(data, f, indent=2)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreError(f"Cannot write {path}: {e}") from e

    def _append_lines(self, path: Path, rows: list[dict[str, Any]]) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with self._lock, open(path, "a", encoding="utf-8") as f:
                for row in rows:
                    f.write(to_json_line(row) + "\n")
        except OSError as e:
            raise StoreError(f"Cannot append to {path}: {e}") from e

    def _read_lines(self, path: Path) -> list[dict[str, Any]]:
        if not path.exists():
            return []
        rows: list[dict[str, Any]] = []
        try:
            with open(path, "r", encoding="utf-8") as f:
                for line_num, line in enumerate(f, 1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        rows.append(json.loads(line))
                    except json.JSONDecodeError as e:
                        raise StoreError(f"Error parsing line {line_num} in {path}: {e}") from e
        except OSError as e:
            raise StoreError(f"Cannot read {path}: {e}") from e
        return rows

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    def load_profile(self, user_id: str) -> UserProfile | None:
        """
        Load a user's profile.

        Returns:
            UserProfile, or None if the user has none

        Raises:
            StoreError: If the file is unreadable or the profile invalid
        """
        profiles = self._read_json(self.profiles_path, {})
        data = profiles.get(user_id)
        if data is None:
            return None
        try:
            return dict_to_user_profile(data)
        except ValidationError as e:
            raise StoreError(f"Invalid profile for {user_id!r}: {e}") from e

    def save_profile(self, user_id: str, profile: UserProfile) -> None:
        """Create or replace a user's profile."""
        self.init()
        with self._lock:
            profiles = self._read_json(self.profiles_path, {})
            profiles[user_id] = user_profile_to_dict(profile)
            self._write_json(self.profiles_path, profiles)

    # ------------------------------------------------------------------
    # Day plans
    # ------------------------------------------------------------------

    def _read_rows(self) -> list[dict[str, Any]]:
        rows = self._read_json(self.plans_path, [])
        if not isinstance(rows, list):
            raise StoreError(f"{self.plans_path} must contain a list of plans")
        return rows

    def list_plans(self, user_id: str) -> list[DayPlan]:
        """
        Load all live plans for a user, sorted by day number.

        Raises:
            StoreError: If the file is unreadable or a row is invalid
        """
        plans: list[DayPlan] = []
        for row in self._read_rows():
            if row.get("user_id") != user_id:
                continue
            try:
                plans.append(dict_to_day_plan(row))
            except ValidationError as e:
                raise StoreError(f"Invalid plan row in {self.plans_path}: {e}") from e
        plans.sort(key=lambda p: p.day_number)
        return plans

    def upsert_plans(self, user_id: str, plans: list[DayPlan]) -> None:
        """
        Insert or update plans keyed by (user_id, date).

        A new row gets a fresh plan_id, which is also set on the passed
        plan.  An existing row for the date is overwritten in place and
        its plan_id is copied onto the passed plan.
        """
        if not plans:
            return
        with self._lock:
            rows = self._read_rows()
            index = {
                (r.get("user_id"), r.get("date")): i for i, r in enumerate(rows)
            }
            for plan in plans:
                key = (user_id, plan.date)
                if key in index:
                    existing = rows[index[key]]
                    plan.plan_id = existing.get("plan_id") or plan.plan_id or uuid.uuid4().hex
                    rows[index[key]] = {"user_id": user_id, **day_plan_to_dict(plan)}
                else:
                    plan.plan_id = plan.plan_id or uuid.uuid4().hex
                    index[key] = len(rows)
                    rows.append({"user_id": user_id, **day_plan_to_dict(plan)})
            self._write_json(self.plans_path, rows)

    def delete_plans(self, user_id: str, plan_ids: list[str]) -> int:
        """
        Delete a user's plans by identifier.

        Returns:
            Number of rows removed
        """
        wanted = set(plan_ids)
        if not wanted:
            return 0
        with self._lock:
            rows = self._read_rows()
            kept = [
                r for r in rows
                if not (r.get("user_id") == user_id and r.get("plan_id") in wanted)
            ]
            removed = len(rows) - len(kept)
            if removed:
                self._write_json(self.plans_path, kept)
        return removed

    # ------------------------------------------------------------------
    # History and job log
    # ------------------------------------------------------------------

    def insert_history(self, user_id: str, records: list[HistoryRecord]) -> None:
        """Append archived day records."""
        self._append_lines(
            self.history_path,
            [{"user_id": user_id, **history_record_to_dict(r)} for r in records],
        )

    def list_history(self, user_id: str) -> list[HistoryRecord]:
        """Load a user's archived days, sorted by date."""
        records: list[HistoryRecord] = []
        for row in self._read_lines(self.history_path):
            if row.get("user_id") != user_id:
                continue
            try:
                records.append(dict_to_history_record(row))
            except ValidationError as e:
                raise StoreError(f"Invalid history row in {self.history_path}: {e}") from e
        records.sort(key=lambda r: (r.date, r.day_number))
        return records

    def insert_job_log(self, entry: JobLogEntry) -> None:
        """Append one generation-run outcome."""
        self._append_lines(self.jobs_path, [job_log_to_dict(entry)])

    def list_job_log(self, user_id: str) -> list[dict[str, Any]]:
        """Raw job-log rows for a user, oldest first."""
        return [r for r in self._read_lines(self.jobs_path) if r.get("user_id") == user_id]


def get_default_data_dir() -> Path:
    """
    Get the default data directory.

    Returns:
        ~/.burn-scheduler
    """
    return Path.home() / ".burn-scheduler"


def get_default_store() -> HorizonStore:
    """
    Get a HorizonStore at the default location.

    Returns:
        HorizonStore instance
    """
    return HorizonStore(get_default_data_dir())
