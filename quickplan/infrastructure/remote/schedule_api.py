"""
REST implementation of the schedule API.
"""

from __future__ import annotations

from typing import Any

from quickplan.infrastructure.remote.http_client import ApiHttpClient
from quickplan.interfaces.schedule_api import IScheduleApi
from quickplan.models.api import ApiResponse
from quickplan.models.schedule import ScheduleCreateRequest, ScheduleRecord, ScheduleUpdateRequest


class RestScheduleApi(IScheduleApi):
    """Schedule endpoints over HTTP."""

    def __init__(self, client: ApiHttpClient):
        self._client = client

    async def list_schedules(self, user_id: str) -> ApiResponse[list[ScheduleRecord]]:
        return await self._client.request("GET", f"/api/schedule/list/{user_id}", list[ScheduleRecord])

    async def create_schedule(self, request: ScheduleCreateRequest) -> ApiResponse[ScheduleRecord]:
        return await self._client.request("POST", "/api/schedule/create", ScheduleRecord, json=request)

    async def update_schedule(self, request: ScheduleUpdateRequest) -> ApiResponse[ScheduleRecord]:
        return await self._client.request("PUT", "/api/schedule/update", ScheduleRecord, json=request)

    async def delete_schedule(self, schedule_id: str) -> ApiResponse[Any]:
        return await self._client.request("DELETE", f"/api/schedule/delete/{schedule_id}")

    async def get_schedules_by_date(self, user_id: str, date: str) -> ApiResponse[list[ScheduleRecord]]:
        return await self._client.request(
            "GET",
            "/api/schedule/date",
            list[ScheduleRecord],
            params={"userId": user_id, "date": date},
        )

    async def get_schedules_by_date_range(
        self,
        user_id: str,
        start_date: str,
        end_date: str,
    ) -> ApiResponse[list[ScheduleRecord]]:
        return await self._client.request(
            "GET",
            "/api/schedule/range",
            list[ScheduleRecord],
            params={"userId": user_id, "startDate": start_date, "endDate": end_date},
        )

    async def get_schedule_detail(self, schedule_id: str) -> ApiResponse[ScheduleRecord]:
        return await self._client.request("GET", f"/api/schedule/detail/{schedule_id}", ScheduleRecord)
