import json

from salon_scheduler.core.config import settings

from .conftest import make_draft

class TestCreateAppointment:

    def test_create_appointment(self, client, employee_headers):
        response = client.post("/appointments", json=make_draft(), headers=employee_headers)
        assert response.status_code == 201
        assert isinstance(response.json()["id"], int)

        listed = client.get("/appointments").json()
        assert len(listed) == 1
        assert listed[0]["client"] == "Lucia Fernandez"
        assert listed[0]["date"] == "2025-11-03"
        assert listed[0]["time"] == "14:00"
        assert listed[0]["price"] == 25.0

    def test_create_requires_token(self, client, users):
        response = client.post("/appointments", json=make_draft())
        assert response.status_code == 401
        assert response.json()["error"] == "unauthenticated"
        assert client.get("/appointments").json() == []

    def test_double_booking_conflict(self, client, employee_headers):
        first = client.post("/appointments", json=make_draft(), headers=employee_headers)
        assert first.status_code == 201

        second = client.post(
            "/appointments",
            json=make_draft(client="Someone Else", service="Color"),
            headers=employee_headers,
        )
        assert second.status_code == 409
        assert second.json()["error"] == "conflict"
        assert second.json()["message"] == "An appointment already exists for that employee at that time"

        listed = client.get("/appointments").json()
        assert [a["id"] for a in listed] == [first.json()["id"]]

    def test_same_slot_other_employee_is_allowed(self, client, admin_headers):
        assert client.post("/appointments", json=make_draft(), headers=admin_headers).status_code == 201
        response = client.post("/appointments", json=make_draft(employee="Bruno"), headers=admin_headers)
        assert response.status_code == 201

    def test_timestamp_date_is_normalized(self, client, employee_headers):
        draft = make_draft(date="2025-11-03T00:00:00.000Z")
        assert client.post("/appointments", json=draft, headers=employee_headers).status_code == 201

        listed = client.get("/appointments").json()
        assert listed[0]["date"] == "2025-11-03"

        # The normalized form occupies the same slot
        response = client.post("/appointments", json=make_draft(), headers=employee_headers)
        assert response.status_code == 409

    def test_optional_fields_default_to_unset(self, client, employee_headers):
        draft = make_draft()
        del draft["notes"]
        del draft["price"]
        appointment_id = client.post("/appointments", json=draft, headers=employee_headers).json()["id"]

        appointment = client.get(f"/appointments/{appointment_id}").json()
        assert appointment["price"] is None
        assert appointment["notes"] is None

    def test_zero_price_is_kept(self, client, employee_headers):
        appointment_id = client.post(
            "/appointments", json=make_draft(price=0), headers=employee_headers
        ).json()["id"]
        assert client.get(f"/appointments/{appointment_id}").json()["price"] == 0

class TestValidation:

    def test_negative_price(self, client, employee_headers):
        response = client.post("/appointments", json=make_draft(price=-5), headers=employee_headers)
        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    def test_bad_date(self, client, employee_headers):
        for bad in ("03/11/2025", "2025-13-01", "2025-11-03garbage", ""):
            response = client.post("/appointments", json=make_draft(date=bad), headers=employee_headers)
            assert response.status_code == 422, bad

    def test_date_parts_must_be_zero_padded(self, client, employee_headers):
        for bad in ("2025-1-3", "2025-11-3", "2025-1-03T00:00:00Z"):
            response = client.post("/appointments", json=make_draft(date=bad), headers=employee_headers)
            assert response.status_code == 422, bad
            assert response.json()["error"] == "validation_error"
        assert client.get("/appointments").json() == []

    def test_non_finite_price(self, client, employee_headers):
        for literal in ("Infinity", "NaN"):
            body = json.dumps(make_draft()).replace("25.0", literal)
            response = client.post(
                "/appointments",
                content=body,
                headers={**employee_headers, "Content-Type": "application/json"},
            )
            assert response.status_code == 422, literal
        assert client.get("/appointments").json() == []

    def test_price_must_fit_the_column(self, client, employee_headers):
        response = client.post("/appointments", json=make_draft(price=1e8), headers=employee_headers)
        assert response.status_code == 422

        response = client.post("/appointments", json=make_draft(price=99999999.99), headers=employee_headers)
        assert response.status_code == 201

    def test_bad_time(self, client, employee_headers):
        for bad in ("2pm", "24:00", "9:00", "14:60"):
            response = client.post("/appointments", json=make_draft(time=bad), headers=employee_headers)
            assert response.status_code == 422, bad

    def test_blank_employee(self, client, employee_headers):
        response = client.post("/appointments", json=make_draft(employee="   "), headers=employee_headers)
        assert response.status_code == 422
        assert "details" in response.json()

    def test_missing_required_field(self, client, employee_headers):
        draft = make_draft()
        del draft["client"]
        response = client.post("/appointments", json=draft, headers=employee_headers)
        assert response.status_code == 422

class TestListAppointments:

    def test_ordering_by_date_then_time(self, client, employee_headers):
        for date, time in [("2025-11-04", "09:00"), ("2025-11-03", "10:00"),
                           ("2025-11-04", "08:30"), ("2025-11-03", "09:00")]:
            response = client.post("/appointments", json=make_draft(date=date, time=time), headers=employee_headers)
            assert response.status_code == 201

        listed = [(a["date"], a["time"]) for a in client.get("/appointments").json()]
        assert listed == [
            ("2025-11-03", "09:00"),
            ("2025-11-03", "10:00"),
            ("2025-11-04", "08:30"),
            ("2025-11-04", "09:00"),
        ]

    def test_descending_dates_keep_times_ascending(self, client, employee_headers):
        for date, time in [("2025-11-03", "10:00"), ("2025-11-04", "09:00"), ("2025-11-03", "09:00")]:
            client.post("/appointments", json=make_draft(date=date, time=time), headers=employee_headers)

        listed = [(a["date"], a["time"]) for a in client.get("/appointments?order=desc").json()]
        assert listed == [
            ("2025-11-04", "09:00"),
            ("2025-11-03", "09:00"),
            ("2025-11-03", "10:00"),
        ]

    def test_filters(self, client, employee_headers):
        client.post("/appointments", json=make_draft(), headers=employee_headers)
        client.post("/appointments", json=make_draft(employee="Bruno"), headers=employee_headers)
        client.post("/appointments", json=make_draft(date="2025-11-05"), headers=employee_headers)

        by_employee = client.get("/appointments", params={"employee": "Bruno"}).json()
        assert [a["employee"] for a in by_employee] == ["Bruno"]

        by_date = client.get("/appointments", params={"date": "2025-11-03"}).json()
        assert {a["employee"] for a in by_date} == {"Ariela", "Bruno"}

    def test_listing_can_require_auth(self, client, employee_headers, monkeypatch):
        monkeypatch.setattr(settings, "APPOINTMENTS_LIST_REQUIRES_AUTH", True)

        assert client.get("/appointments").status_code == 401
        assert client.get("/appointments", headers=employee_headers).status_code == 200

    def test_get_missing_appointment(self, client, users):
        response = client.get("/appointments/999")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

class TestUpdateAppointment:

    def test_update_replaces_fields(self, client, employee_headers):
        appointment_id = client.post("/appointments", json=make_draft(), headers=employee_headers).json()["id"]

        replacement = make_draft(client="Lucia F.", time="15:30", notes="Bring reference photo", price=None)
        response = client.put(f"/appointments/{appointment_id}", json=replacement, headers=employee_headers)
        assert response.status_code == 200
        assert response.json() == {"updated": True}

        appointment = client.get(f"/appointments/{appointment_id}").json()
        assert appointment["client"] == "Lucia F."
        assert appointment["time"] == "15:30"
        assert appointment["notes"] == "Bring reference photo"
        assert appointment["price"] is None

    def test_update_keeping_own_slot(self, client, employee_headers):
        appointment_id = client.post("/appointments", json=make_draft(), headers=employee_headers).json()["id"]
        response = client.put(
            f"/appointments/{appointment_id}", json=make_draft(service="Color"), headers=employee_headers
        )
        assert response.status_code == 200

    def test_update_into_taken_slot_conflicts(self, client, employee_headers):
        client.post("/appointments", json=make_draft(), headers=employee_headers)
        other_id = client.post(
            "/appointments", json=make_draft(time="16:00"), headers=employee_headers
        ).json()["id"]

        response = client.put(f"/appointments/{other_id}", json=make_draft(), headers=employee_headers)
        assert response.status_code == 409
        assert client.get(f"/appointments/{other_id}").json()["time"] == "16:00"

    def test_update_missing_appointment(self, client, employee_headers):
        response = client.put("/appointments/999", json=make_draft(), headers=employee_headers)
        assert response.status_code == 404

    def test_update_requires_token(self, client, employee_headers):
        appointment_id = client.post("/appointments", json=make_draft(), headers=employee_headers).json()["id"]
        response = client.put(f"/appointments/{appointment_id}", json=make_draft(time="16:00"))
        assert response.status_code == 401

class TestDeleteAppointment:

    def test_delete_hides_appointment(self, client, employee_headers):
        keep_id = client.post("/appointments", json=make_draft(time="09:00"), headers=employee_headers).json()["id"]
        drop_id = client.post("/appointments", json=make_draft(), headers=employee_headers).json()["id"]

        response = client.delete(f"/appointments/{drop_id}", headers=employee_headers)
        assert response.status_code == 200
        assert response.json() == {"deleted": True}

        assert [a["id"] for a in client.get("/appointments").json()] == [keep_id]

        # A second delete reports the id as gone and leaves other rows intact
        response = client.delete(f"/appointments/{drop_id}", headers=employee_headers)
        assert response.status_code == 404
        assert [a["id"] for a in client.get("/appointments").json()] == [keep_id]

    def test_delete_frees_the_slot(self, client, employee_headers):
        appointment_id = client.post("/appointments", json=make_draft(), headers=employee_headers).json()["id"]
        client.delete(f"/appointments/{appointment_id}", headers=employee_headers)

        assert client.post("/appointments", json=make_draft(), headers=employee_headers).status_code == 201

    def test_delete_roles_are_configurable(self, client, admin_headers, employee_headers, monkeypatch):
        from salon_scheduler.api import deps
        from salon_scheduler.api.routes import appointments as routes
        from salon_scheduler.main import app

        appointment_id = client.post("/appointments", json=make_draft(), headers=employee_headers).json()["id"]

        app.dependency_overrides[routes.get_appointment_remover] = deps.get_admin_identity
        try:
            denied = client.delete(f"/appointments/{appointment_id}", headers=employee_headers)
            assert denied.status_code == 403
            assert denied.json()["error"] == "forbidden"

            allowed = client.delete(f"/appointments/{appointment_id}", headers=admin_headers)
            assert allowed.status_code == 200
        finally:
            del app.dependency_overrides[routes.get_appointment_remover]
