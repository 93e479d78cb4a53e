from __future__ import annotations

import pytest

from src.college_records.college_records.main import create_app


@pytest.fixture
def app(container):
    return create_app(container=container, settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


def login_as(client, user_id: int, role: str) -> None:
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role


def test_health(client):
    assert client.get("/health").get_json() == {"status": "ok"}


def test_requests_without_session_are_unauthorized(client):
    assert client.get("/api/dashboard").status_code == 401
    assert client.get("/api/fee/me").status_code == 401


def test_login_then_dashboard(client):
    resp = client.post("/api/auth/login", json={"email": "student@college.edu", "password": "secret123"})
    assert resp.status_code == 200
    assert resp.get_json()["user"]["role"] == "student"

    cards = client.get("/api/dashboard").get_json()["cards"]
    assert {c["title"]: c["value"] for c in cards}["Attendance %"] == "0%"


def test_bad_login_is_401(client):
    resp = client.post("/api/auth/login", json={"email": "student@college.edu", "password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid credentials"


def test_register_duplicate_is_409(client):
    body = {"name": "X", "email": "teacher@college.edu", "password": "secret123", "role": "teacher",
            "teacherId": "T-77", "department": "Physics"}
    assert client.post("/api/auth/register", json=body).status_code == 409


def test_fee_flow(client):
    login_as(client, 30, "admin")
    resp = client.post("/api/fee/set", json={"student": 1, "total": 1000, "dueDate": "2030-01-01"})
    assert resp.status_code == 201
    assert client.post("/api/fee/set", json={"student": 1, "total": 5, "dueDate": "2030-01-01"}).status_code == 409

    login_as(client, 1, "student")
    resp = client.post("/api/fee/pay", json={"amount": 250})
    assert resp.status_code == 200
    assert resp.get_json()["fee"]["paid"] == 250.0

    fee = client.get("/api/fee/me").get_json()
    assert (fee["remaining"], fee["status"]) == (750.0, "Partial")
    assert client.get("/api/fee/all").status_code == 403


def test_pay_without_fee_is_404(client):
    login_as(client, 1, "student")
    resp = client.post("/api/fee/pay", json={"amount": 10})
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Fee record not found"


def test_salary_is_hod_only(client):
    login_as(client, 10, "teacher")
    assert client.post("/api/salary/set", json={"staff": 10, "total": 100, "dueDate": "2030-01-01"}).status_code == 403

    login_as(client, 20, "hod")
    assert client.post("/api/salary/set", json={"staff": 10, "total": 100, "dueDate": "2030-01-01"}).status_code == 201
    assert client.post("/api/salary/pay", json={"staff": 10, "amount": 100}).get_json()["salary"]["status"] == "Paid"


def test_attendance_batch_reports_rows(client):
    login_as(client, 10, "teacher")
    resp = client.post(
        "/api/attendance/mark",
        json={
            "courseId": 100,
            "date": "2025-01-10",
            "records": [{"studentId": 1, "status": "present"}, {"studentId": 2, "status": "late"}],
        },
    )

    data = resp.get_json()
    assert resp.status_code == 200
    assert (data["marked"], data["failed"]) == (1, 1)

    login_as(client, 1, "student")
    assert [r["status"] for r in client.get("/api/attendance/me").get_json()] == ["present"]


def test_teacher_self_attendance_second_mark_is_400(client):
    login_as(client, 10, "teacher")
    assert client.post("/api/teacher-attendance/mark", json={"status": "Present", "date": "2025-01-10"}).status_code == 201

    resp = client.post("/api/teacher-attendance/mark", json={"status": "Absent", "date": "2025-01-10"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Attendance already marked for this day"

    mine = client.get("/api/teacher-attendance/my-attendance?date=2025-01-10").get_json()
    assert [r["status"] for r in mine] == ["Present"]


def test_assignment_flow(client):
    login_as(client, 10, "teacher")
    created = client.post("/api/assignment/create", json={"title": "A1", "courseId": 100, "dueDate": "2025-01-20"})
    assert created.status_code == 201
    assignment_id = created.get_json()["id"]

    assert client.post(f"/api/assignment/evaluate/{assignment_id}", json={"studentId": 1, "marks": 5}).status_code == 404

    login_as(client, 1, "student")
    assert client.post(f"/api/assignment/submit/{assignment_id}").status_code == 201
    assert client.post(f"/api/assignment/submit/{assignment_id}").status_code == 409

    login_as(client, 10, "teacher")
    resp = client.post(f"/api/assignment/evaluate/{assignment_id}", json={"studentId": 1, "marks": 9})
    assert resp.get_json()["assignment"]["submissions"][0]["state"] == "EVALUATED"


def test_exam_schedule_routes(client):
    login_as(client, 20, "hod")
    body = {"examName": "Final", "course": "CS201", "examDate": "2025-05-02", "startTime": "09:00",
            "endTime": "11:00", "location": "Block A", "venue": 12}
    exam_id = client.post("/api/examschedule/add", json=body).get_json()["id"]

    login_as(client, 1, "student")
    assert [e["id"] for e in client.get("/api/examschedule/all").get_json()] == [exam_id]
    assert client.delete(f"/api/examschedule/delete/{exam_id}").status_code == 403


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/nowhere")
    assert resp.status_code == 404
    assert "message" in resp.get_json()


def test_invalid_session_role_is_forbidden(client):
    login_as(client, 1, "guest")
    assert client.get("/api/dashboard").status_code == 403


def test_teacher_attendance_all_filters_by_month(client):
    login_as(client, 10, "teacher")
    client.post("/api/teacher-attendance/mark", json={"status": "Present", "date": "2025-01-10"})
    client.post("/api/teacher-attendance/mark", json={"status": "Late", "date": "2025-02-03"})

    login_as(client, 20, "hod")
    feb = client.get("/api/teacher-attendance/all?month=2&year=2025").get_json()
    assert [r["date"] for r in feb] == ["2025-02-03"]
    assert client.get("/api/teacher-attendance/stats?date=2025-01-10").get_json()["present"] == 1


def test_out_of_range_money_is_400(client):
    login_as(client, 30, "admin")
    assert client.post("/api/fee/set", json={"student": 1, "total": "0.001", "dueDate": "2030-01-01"}).status_code == 400
    assert client.post("/api/fee/set", json={"student": 1, "total": 1000, "dueDate": "2030-01-01"}).status_code == 201

    login_as(client, 1, "student")
    assert client.post("/api/fee/pay", json={"amount": "1e15"}).status_code == 400
    assert client.post("/api/fee/pay", json={"amount": "0.004"}).status_code == 400
