from __future__ import annotations

from typing import Any, BinaryIO

from pos_client.http.client import ApiClient
from pos_client.models import AttendanceRecord, AttendanceStatus, Staff, parse_list

from ._params import compact_params


class StaffService:
    base_path = "/api/hr"

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def list_staff(self) -> list[Staff]:
        return parse_list(Staff, await self.client.get(f"{self.base_path}/staff/"))

    async def get_staff(self, staff_id: int) -> Staff:
        return Staff.model_validate(await self.client.get(f"{self.base_path}/staff/{staff_id}/"))

    async def create_staff(
        self,
        *,
        name: str,
        position: str,
        phone: str,
        joining_date: str,
        salary: float | str,
        email: str | None = None,
        is_active: bool = True,
        aadhaar_file: BinaryIO | None = None,
        aadhaar_filename: str = "aadhaar.pdf",
    ) -> Staff:
        """Create a staff member; an ID document switches the upload to multipart."""
        if aadhaar_file is not None:
            form = compact_params(
                name=name,
                position=position,
                phone=phone,
                email=email,
                joining_date=joining_date,
                salary=str(salary),
                is_active=str(is_active).lower(),
            )
            body = await self.client.post_form(
                f"{self.base_path}/staff/",
                data=form,
                files={"aadhaar_file": (aadhaar_filename, aadhaar_file)},
            )
            return Staff.model_validate(body)

        payload = {
            "name": name,
            "position": position,
            "phone": phone,
            "email": email,
            "joiningDate": joining_date,
            "salary": salary,
            "is_active": is_active,
        }
        return Staff.model_validate(await self.client.post(f"{self.base_path}/staff/", payload))

    async def update_staff(self, staff_id: int, changes: dict[str, Any]) -> Staff:
        allowed = {"name", "position", "phone", "email", "joiningDate", "salary"}
        payload = {k: v for k, v in changes.items() if k in allowed}
        return Staff.model_validate(await self.client.patch(f"{self.base_path}/staff/{staff_id}/", payload))

    async def delete_staff(self, staff_id: int) -> None:
        await self.client.delete(f"{self.base_path}/staff/{staff_id}/")

    async def attendance_history(self, staff_id: int) -> list[AttendanceRecord]:
        rows = await self.client.get(f"{self.base_path}/staff/{staff_id}/attendance-history/")
        return parse_list(AttendanceRecord, rows)

    # ---- attendance ----

    async def list_attendance(
        self,
        *,
        staff_id: int | None = None,
        date: str | None = None,
        status: AttendanceStatus | None = None,
    ) -> list[AttendanceRecord]:
        params = compact_params(staff=staff_id, date=date, status=status)
        rows = await self.client.get(f"{self.base_path}/attendance/", params=params or None)
        return parse_list(AttendanceRecord, rows)

    async def mark_attendance(self, staff_id: int, date: str, status: AttendanceStatus) -> AttendanceRecord:
        body = await self.client.post(
            f"{self.base_path}/attendance/",
            {"staffId": staff_id, "date": date, "status": status},
        )
        return AttendanceRecord.model_validate(body)

    async def update_attendance(self, attendance_id: int, changes: dict[str, Any]) -> AttendanceRecord:
        body = await self.client.patch(f"{self.base_path}/attendance/{attendance_id}/", changes)
        return AttendanceRecord.model_validate(body)

    async def delete_attendance(self, attendance_id: int) -> None:
        await self.client.delete(f"{self.base_path}/attendance/{attendance_id}/")
