from supabase import Client
from cloud_tracker.modules.maintenance.schemas import (
    CommandTypeResponse, MaintenanceRunCreate, MaintenanceRunUpdate,
    MaintenanceRunResponse, MaintenanceStatusItem
)
from cloud_tracker.core.dependencies import get_owned_application
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class MaintenanceService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_command_types(self, active_only: bool = False) -> List[CommandTypeResponse]:
        try:
            query = self.supabase.table("maintenance_command_types").select("*")
            if active_only:
                query = query.eq("is_active", True)
            result = query.order("sort_order").execute()
            return [CommandTypeResponse(**c) for c in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching command types: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch maintenance command types")

    def list_runs(self, application_id: str) -> List[MaintenanceRunResponse]:
        """Runs for an application, newest first, each with its command type"""
        try:
            result = self.supabase.table("maintenance_runs")\
                .select("*")\
                .eq("application_id", application_id)\
                .order("run_at", desc=True)\
                .execute()
            runs = result.data or []
            types = {c.id: c for c in self.list_command_types()}
            return [MaintenanceRunResponse(**run, command_type=types.get(run["command_type_id"])) for run in runs]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching maintenance runs: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch maintenance runs")

    def get_latest_status(self, application_id: str, now: Optional[datetime] = None) -> List[MaintenanceStatusItem]:
        """Latest run per active command type, with days since and overdue flag"""
        now = now or datetime.now(timezone.utc)
        command_types = self.list_command_types(active_only=True)
        try:
            result = self.supabase.table("maintenance_runs")\
                .select("command_type_id, run_at, status")\
                .eq("application_id", application_id)\
                .order("run_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching latest maintenance status: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch maintenance status")

        latest: Dict[str, Dict[str, Any]] = {}
        for run in result.data or []:
            latest.setdefault(run["command_type_id"], run)

        items = []
        for command_type in command_types:
            run = latest.get(command_type.id)
            if run is None:
                items.append(MaintenanceStatusItem(command_type=command_type))
                continue
            run_at = _parse_timestamp(run["run_at"])
            days = (now - run_at).days
            items.append(MaintenanceStatusItem(
                command_type=command_type,
                last_run_at=run_at,
                last_status=run["status"],
                days_since_run=days,
                is_overdue=days > command_type.recommended_frequency_days,
                never_run=False,
            ))
        return items

    def _get_owned_run(self, run_id: str, user_id: str) -> Dict[str, Any]:
        result = self.supabase.table("maintenance_runs")\
            .select("*")\
            .eq("id", run_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Maintenance run not found")
        run = result.data[0]
        get_owned_application(run["application_id"], {"id": user_id}, self.supabase, columns="id")
        return run

    def create_run(self, run_data: MaintenanceRunCreate, user_id: str) -> MaintenanceRunResponse:
        get_owned_application(run_data.application_id, {"id": user_id}, self.supabase, columns="id")
        try:
            payload = run_data.model_dump(mode="json", exclude_none=True)
            payload.setdefault("run_at", datetime.now(timezone.utc).isoformat())

            result = self.supabase.table("maintenance_runs").insert(payload).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create maintenance run")

            return MaintenanceRunResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating maintenance run: {e}")
            raise HTTPException(status_code=500, detail="Failed to create maintenance run")

    def update_run(self, run_id: str, run_data: MaintenanceRunUpdate, user_id: str) -> MaintenanceRunResponse:
        run = self._get_owned_run(run_id, user_id)
        update_data = run_data.model_dump(exclude_unset=True)
        if not update_data:
            return MaintenanceRunResponse(**run)
        try:
            result = self.supabase.table("maintenance_runs")\
                .update(update_data)\
                .eq("id", run_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Maintenance run not found")

            return MaintenanceRunResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating maintenance run {run_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update maintenance run")

    def delete_run(self, run_id: str, user_id: str) -> bool:
        self._get_owned_run(run_id, user_id)
        try:
            self.supabase.table("maintenance_runs")\
                .delete()\
                .eq("id", run_id)\
                .execute()
            return True
        except Exception as e:
            logger.error(f"Error deleting maintenance run {run_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete maintenance run")
