"""
Schedule repository.

Keeps the in-memory list of the user's schedules in sync with the backend.
The list is always sorted by date (stable, so same-day entries keep their
relative order) and is only ever replaced as a whole or mutated after the
backend confirmed the change.
"""

from __future__ import annotations

from datetime import date, time
from typing import Optional

from quickplan.core.config import Settings, get_settings
from quickplan.core.exceptions import DataIntegrityError
from quickplan.core.logger import setup_logger
from quickplan.core.observable import Observable
from quickplan.interfaces.credential_store import ICredentialStore
from quickplan.interfaces.schedule_api import IScheduleApi
from quickplan.models.schedule import (
    ScheduleCreateRequest,
    ScheduleEntry,
    ScheduleRecord,
    ScheduleUpdateRequest,
)
from quickplan.utils.datetime_utils import format_date, format_time, parse_date, parse_time

logger = setup_logger(__name__)


def sort_by_date(entries: list[ScheduleEntry]) -> list[ScheduleEntry]:
    return sorted(entries, key=lambda entry: entry.date)


def record_to_entry(record: ScheduleRecord) -> ScheduleEntry:
    """
    Map a backend record to a cache entry.

    The server id becomes both the local and the server identifier.

    Raises:
        DataIntegrityError: Blank id or unparsable date
        TimeParseError: Unparsable time
    """
    if not record.id or not record.id.strip():
        raise DataIntegrityError("Server returned a schedule with an empty id")
    return ScheduleEntry(
        id=record.id,
        server_id=record.id,
        title=record.title,
        date=parse_date(record.date),
        time=parse_time(record.time),
        location=record.location,
        description=record.description,
    )


class ScheduleRepository:
    """
    Schedule cache backed by the remote schedule API.

    One instance is shared by every consumer (see AppContext). Failures
    are raised to the caller; the cache is left untouched by any failed
    operation.
    """

    def __init__(
        self,
        schedule_api: IScheduleApi,
        credential_store: ICredentialStore,
        settings: Optional[Settings] = None,
    ):
        self._api = schedule_api
        self._store = credential_store
        self._settings = settings or get_settings()
        self.entries: Observable[list[ScheduleEntry]] = Observable([])

    async def _current_user_id(self) -> str:
        profile = await self._store.get_profile()
        return profile.user_id if profile else self._settings.DEFAULT_SCHEDULE_USER_ID

    def clear_cache(self) -> None:
        """Empty the cache without contacting the backend."""
        self.entries.set([])

    async def refresh(self) -> None:
        """Replace the whole cache with the backend's list."""
        user_id = await self._current_user_id()
        logger.debug(f"Refreshing schedules for {user_id}")
        response = await self._api.list_schedules(user_id)
        response.raise_for_failure("Failed to load schedules")
        entries = [record_to_entry(record) for record in response.data or []]
        self.entries.set(sort_by_date(entries))
        logger.debug(f"Refreshed {len(entries)} schedules")

    async def add(
        self,
        title: str,
        date: date,
        time: time,
        location: Optional[str] = None,
        description: Optional[str] = None,
    ) -> ScheduleEntry:
        """
        Create a schedule on the backend.

        The new entry is returned but not inserted into the cache; call
        refresh() to see it in `entries`.
        """
        request = ScheduleCreateRequest(
            user_id=await self._current_user_id(),
            title=title,
            location=location,
            date=format_date(date),
            time=format_time(time),
            description=description,
        )
        response = await self._api.create_schedule(request)
        return record_to_entry(response.require_data("Failed to create schedule"))

    async def update(self, entry: ScheduleEntry) -> ScheduleEntry:
        """Update a schedule and replace the cached entry with the same local id."""
        request = ScheduleUpdateRequest(
            id=entry.remote_id,
            user_id=await self._current_user_id(),
            title=entry.title,
            location=entry.location,
            date=format_date(entry.date),
            time=format_time(entry.time),
            description=entry.description,
        )
        response = await self._api.update_schedule(request)
        updated = record_to_entry(response.require_data("Failed to update schedule"))

        current = list(self.entries.value)
        for index, existing in enumerate(current):
            if existing.id == entry.id:
                current[index] = updated
                break
        else:
            current.append(updated)
        self.entries.set(sort_by_date(current))
        return updated

    async def delete(self, entry: ScheduleEntry) -> None:
        """Delete a schedule; the cache changes only after the backend confirms."""
        response = await self._api.delete_schedule(entry.remote_id)
        response.raise_for_failure("Failed to delete schedule")
        self.entries.set([existing for existing in self.entries.value if existing.id != entry.id])

    async def get_by_date(self, day: date) -> list[ScheduleEntry]:
        """Fetch one day's schedules directly from the backend."""
        response = await self._api.get_schedules_by_date(await self._current_user_id(), format_date(day))
        response.raise_for_failure("Failed to load schedules")
        return [record_to_entry(record) for record in response.data or []]

    async def get_by_date_range(self, start: date, end: date) -> list[ScheduleEntry]:
        """Fetch schedules between two days directly from the backend."""
        response = await self._api.get_schedules_by_date_range(
            await self._current_user_id(),
            format_date(start),
            format_date(end),
        )
        response.raise_for_failure("Failed to load schedules")
        return [record_to_entry(record) for record in response.data or []]

    async def get_detail(self, schedule_id: str) -> ScheduleEntry:
        response = await self._api.get_schedule_detail(schedule_id)
        return record_to_entry(response.require_data("Failed to load schedule"))
