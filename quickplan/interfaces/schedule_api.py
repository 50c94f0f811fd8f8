"""
Schedule API interface.

Defines the contract for the remote schedule endpoints. A 2xx answer is
returned as its envelope; non-2xx raises HttpStatusError and a missing
response raises TransportError.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from quickplan.models.api import ApiResponse
from quickplan.models.schedule import ScheduleCreateRequest, ScheduleRecord, ScheduleUpdateRequest


class IScheduleApi(ABC):
    """Abstract interface for the schedule endpoints."""

    @abstractmethod
    async def list_schedules(self, user_id: str) -> ApiResponse[list[ScheduleRecord]]:
        """
        List every schedule of a user.

        Args:
            user_id: Owner user ID

        Returns:
            Envelope with the raw records
        """
        pass

    @abstractmethod
    async def create_schedule(self, request: ScheduleCreateRequest) -> ApiResponse[ScheduleRecord]:
        pass

    @abstractmethod
    async def update_schedule(self, request: ScheduleUpdateRequest) -> ApiResponse[ScheduleRecord]:
        pass

    @abstractmethod
    async def delete_schedule(self, schedule_id: str) -> ApiResponse[Any]:
        pass

    @abstractmethod
    async def get_schedules_by_date(self, user_id: str, date: str) -> ApiResponse[list[ScheduleRecord]]:
        """
        List schedules on one day.

        Args:
            user_id: Owner user ID
            date: Day as YYYY-MM-DD
        """
        pass

    @abstractmethod
    async def get_schedules_by_date_range(
        self,
        user_id: str,
        start_date: str,
        end_date: str,
    ) -> ApiResponse[list[ScheduleRecord]]:
        """
        List schedules between two days (inclusive).

        Args:
            user_id: Owner user ID
            start_date: First day as YYYY-MM-DD
            end_date: Last day as YYYY-MM-DD
        """
        pass

    @abstractmethod
    async def get_schedule_detail(self, schedule_id: str) -> ApiResponse[ScheduleRecord]:
        pass
