from __future__ import annotations

from datetime import date, datetime

from timesheet_compare.config import settings
from timesheet_compare.exceptions import SourceUnavailableError
from timesheet_compare.models import AttendanceDay
from timesheet_compare.services.attendance_store import AttendanceStore
from tests.factories import make_record

API = settings.API_PREFIX

IMPORT_BODY = {
    "employees": [
        {
            "employee_id": "E100",
            "employee_name": "Amina Rahman",
            "company": "Sample Contracting",
            "entries": [
                {"date": "01/01/2026", "day": "Thursday", "in1": "08:00", "out2": "17:00", "net_work_hours": "08:00"},
                {"date": "02/01/2026", "day": "Friday", "in1": None, "out2": None, "net_work_hours": "03:30"},
            ],
        }
    ]
}

RANGE = {"mode": "range", "start_date": "01/01/2026", "end_date": "03/01/2026"}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestTimesheetRoutes:
    def test_import_and_list(self, client):
        response = client.post(API + "/timesheets/import", json=IMPORT_BODY)
        assert response.status_code == 200
        body = response.json()
        assert body["employee_count"] == 1
        assert body["imported_at"]
        assert body["date_range"] == {"start": "01/01/2026", "end": "02/01/2026"}

        response = client.get(API + "/employees")
        assert response.status_code == 200
        assert response.json()["employees"] == [
            {"id": "E100", "name": "Amina Rahman", "updated": False, "suspect_days": 0}
        ]

    def test_import_requires_employees(self, client):
        response = client.post(API + "/timesheets/import", json={"employees": []})
        assert response.status_code == 400

    def test_list_requires_import(self, client):
        assert client.get(API + "/employees").status_code == 400

    def test_mark_updated(self, client):
        client.post(API + "/timesheets/import", json=IMPORT_BODY)
        response = client.post(API + "/employees/E100/updated")
        assert response.status_code == 200
        assert response.json()["updated_employees"] == ["E100"]
        assert client.get(API + "/employees").json()["employees"][0]["updated"] is True

    def test_clear_import(self, client):
        client.post(API + "/timesheets/import", json=IMPORT_BODY)
        assert client.delete(API + "/timesheets/import").json() == {"success": True}
        assert client.get(API + "/employees").status_code == 400

    def test_validate_filters_to_directory(self, client, db, employee):
        body = {"employees": IMPORT_BODY["employees"] + [
            {"employee_id": "E555", "employee_name": "Zaid Noor", "entries": []},
        ]}
        client.post(API + "/timesheets/import", json=body)

        response = client.get(API + "/employees/validate")

        assert response.status_code == 200
        result = response.json()
        assert [item["id"] for item in result["employees"]] == ["E100"]
        assert result["total_in_spreadsheet"] == 2
        assert result["filtered_count"] == 1


class TestComparisonRoutes:
    def test_numeric_spreadsheet_times_are_decoded(self, client, employee):
        body = {"employees": [{
            "employee_id": "E100",
            "employee_name": "Amina Rahman",
            "entries": [{"date": "01/01/2026", "in1": 0.35417, "out2": 0.75, "net_work_hours": 0.395833}],
        }]}
        assert client.post(API + "/timesheets/import", json=body).status_code == 200

        response = client.get(API + "/comparison/E100", params=RANGE)

        spreadsheet = response.json()["days"][0]["spreadsheet"]
        assert spreadsheet["check_in"] == "08:30"
        assert spreadsheet["check_out"] == "18:00"
        assert spreadsheet["net_work_hours"] == "09:30"

    def test_requires_import_or_directory(self, client):
        response = client.get(API + "/comparison/E100", params=RANGE)
        assert response.status_code == 400

    def test_unknown_employee(self, client):
        client.post(API + "/timesheets/import", json=IMPORT_BODY)
        assert client.get(API + "/comparison/E999", params=RANGE).status_code == 404

    def test_invalid_filter(self, client, employee):
        response = client.get(API + "/comparison/E100", params={"mode": "month", "month": "January"})
        assert response.status_code == 400

    def test_comparison_days(self, client, db, employee):
        client.post(API + "/timesheets/import", json=IMPORT_BODY)
        db.add(make_record(employee.id, date(2026, 1, 2), datetime(2026, 1, 2, 4, 0), datetime(2026, 1, 2, 7, 30), 12600))
        db.commit()

        response = client.get(API + "/comparison/E100", params=RANGE)

        assert response.status_code == 200
        body = response.json()
        assert [day["date"] for day in body["days"]] == ["01/01/2026", "02/01/2026", "03/01/2026"]
        assert body["days"][1]["database"]["first_check_in"] == "08:00"
        assert body["days"][1]["selection"] == {"check_in": "database", "check_out": "database"}
        assert body["total_issues"] == 3
        assert body["employee"]["internal_id"] == employee.id
        assert body["database_available"] is True

    def test_degraded_when_store_unavailable(self, client, employee, monkeypatch):
        def unavailable(self, *args, **kwargs):
            raise SourceUnavailableError("timeout")

        monkeypatch.setattr(AttendanceStore, "records_for", unavailable)
        client.post(API + "/timesheets/import", json=IMPORT_BODY)

        response = client.get(API + "/comparison/E100", params=RANGE)

        assert response.status_code == 200
        assert response.json()["database_available"] is False
        assert response.json()["days"][0]["spreadsheet"]["check_in"] == "08:00"


class TestAttendanceRoutes:
    def test_bulk_update(self, client, db, employee):
        payload = {"updates": [
            {"date": "05/03/2026", "check_in_date": "05/03/2026", "check_in_time": "08:00",
             "check_out_date": "05/03/2026", "check_out_time": "17:00"},
            {"date": "06/03/2026", "check_in_date": "06/03/2026", "check_in_time": "99:00"},
        ]}

        response = client.post(API + "/attendance/E100/bulk", json=payload)

        assert response.status_code == 200
        assert response.json() == {
            "success": False,
            "updated_count": 1,
            "errors": ["Invalid check-in time format: 99:00"],
        }
        assert db.query(AttendanceDay).count() == 1

    def test_bulk_update_unknown_employee(self, client):
        response = client.post(API + "/attendance/E404/bulk", json={"updates": []})
        assert response.status_code == 404

    def test_bulk_delete(self, client, db, employee):
        db.add(make_record(employee.id, date(2026, 3, 5), datetime(2026, 3, 5, 4, 0), None))
        db.commit()

        response = client.request(
            "DELETE", API + "/attendance/E100/delete", json={"dates": ["05/03/2026", "06/03/2026"]}
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "deleted_count": 1, "errors": []}

    def test_bulk_delete_requires_dates(self, client, employee):
        response = client.request("DELETE", API + "/attendance/E100/delete", json={"dates": []})
        assert response.status_code == 400


class TestSuspectDayRoutes:
    def test_mark_list_and_unmark(self, client):
        marker = {"employee_id": "E100", "date": "03/01/2026"}

        assert client.post(API + "/suspect-days", json=marker).status_code == 200
        assert client.post(API + "/suspect-days", json=marker).status_code == 200
        assert client.get(API + "/suspect-days", params={"employee_id": "E100"}).json()["dates"] == ["03/01/2026"]
        assert client.get(API + "/suspect-days/counts").json() == {"counts": {"E100": 1}}

        assert client.request("DELETE", API + "/suspect-days", json=marker).status_code == 200
        assert client.get(API + "/suspect-days", params={"employee_id": "E100"}).json()["dates"] == []

    def test_list_requires_employee(self, client):
        assert client.get(API + "/suspect-days").status_code == 400

    def test_rejects_bad_date(self, client):
        response = client.post(API + "/suspect-days", json={"employee_id": "E100", "date": "2026-01-03"})
        assert response.status_code == 400

    def test_counts_show_in_employee_list(self, client):
        client.post(API + "/timesheets/import", json=IMPORT_BODY)
        client.post(API + "/suspect-days", json={"employee_id": "E100", "date": "02/01/2026"})
        assert client.get(API + "/employees").json()["employees"][0]["suspect_days"] == 1
