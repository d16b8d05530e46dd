from bson import ObjectId

from placement_portal.services.mongo_service import CompanyService
from tests.conftest import FULL_PROFILE, add_company, bearer, register_student


def test_add_and_list_companies(client, admin_headers, student):
    add_company(client, admin_headers, "Acme", tenth=60)
    _, headers = student

    for h in (admin_headers, headers):
        resp = client.get("/api/companies", headers=h)
        assert resp.status_code == 200
        [company] = resp.json()
        assert company["name"] == "Acme"
        assert company["eligibility"] == {
            "tenthMarks": 60, "twelfthMarks": 70, "cgpaAggregate": 7.5, "activeBacklog": "no"
        }


def test_duplicate_company_name(client, admin_headers):
    add_company(client, admin_headers, "Acme")
    resp = client.post("/api/companies", headers=admin_headers, json={
        "name": "Acme",
        "visitingDate": "2026-12-01T09:00:00",
        "eligibility": {"tenthMarks": 50, "twelfthMarks": 50, "cgpaAggregate": 6, "activeBacklog": "yes"},
    })
    assert resp.status_code == 400
    assert resp.json()["message"] == "Company with this name already exists"


def test_company_eligibility_is_bounded(client, admin_headers):
    resp = client.post("/api/companies", headers=admin_headers, json={
        "name": "Bad",
        "visitingDate": "2026-12-01T09:00:00",
        "eligibility": {"tenthMarks": 50, "twelfthMarks": 50, "cgpaAggregate": 11, "activeBacklog": "no"},
    })
    assert resp.status_code == 400


def test_students_cannot_add_companies(client, student):
    _, headers = student
    resp = client.post("/api/companies", headers=headers, json={
        "name": "Acme",
        "visitingDate": "2026-12-01T09:00:00",
        "eligibility": {"tenthMarks": 50, "twelfthMarks": 50, "cgpaAggregate": 6, "activeBacklog": "no"},
    })
    assert resp.status_code == 403


def test_delete_company(client, admin_headers):
    company = add_company(client, admin_headers, "Acme")
    assert client.delete(f"/api/companies/{company['id']}", headers=admin_headers).status_code == 200
    assert client.get("/api/companies", headers=admin_headers).json() == []
    assert client.delete(f"/api/companies/{company['id']}", headers=admin_headers).status_code == 404


def test_profile_update_and_read(client):
    body = register_student(client, "p@college.edu")
    headers = bearer(body["token"])

    resp = client.get("/api/students/profile", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["fullyRegistered"] is False
    assert "passwordHash" not in resp.json() and "password_hash" not in resp.json()

    resp = client.post("/api/students/profile", headers=headers, json=FULL_PROFILE)
    assert resp.status_code == 200
    student = resp.json()["student"]
    assert student["fullyRegistered"] is True
    assert student["cgpaAggregate"] == 8.2

    # Empty strings keep stored values, zero marks are accepted
    resp = client.put("/api/students/profile", headers=headers, json={"name": "", "tenthMarks": 0})
    student = resp.json()["student"]
    assert student["name"] == "Asha Patil"
    assert student["tenthMarks"] == 0


def test_profile_rejects_out_of_range_values(client, student):
    _, headers = student
    assert client.put("/api/students/profile", headers=headers, json={"cgpaAggregate": 12}).status_code == 400
    assert client.put("/api/students/profile", headers=headers, json={"branch": "MECH"}).status_code == 400


def test_eligible_companies_for_student(client, admin_headers, student):
    add_company(client, admin_headers, "Easy", tenth=70, twelfth=70, cgpa=7.5, backlog="no")
    add_company(client, admin_headers, "Hard", tenth=90, twelfth=70, cgpa=7.5, backlog="no")
    _, headers = student

    resp = client.get("/api/students/eligible-companies", headers=headers)
    assert resp.status_code == 200
    assert [c["name"] for c in resp.json()] == ["Easy"]


def test_eligible_companies_needs_complete_profile(client, admin_headers):
    add_company(client, admin_headers, "Easy")
    body = register_student(client, "incomplete@college.edu")
    resp = client.get("/api/students/eligible-companies", headers=bearer(body["token"]))
    assert resp.status_code == 404
    assert "incomplete" in resp.json()["message"]


def test_eligible_students_for_company(client, admin_headers, student):
    company = add_company(client, admin_headers, "Acme")
    student_id, _ = student
    register_student(client, "backlog@college.edu", profile=dict(FULL_PROFILE, activeBacklog="yes"))
    register_student(client, "blank@college.edu")

    resp = client.get(f"/api/companies/{company['id']}/eligible-students", headers=admin_headers)
    assert resp.status_code == 200
    assert [s["id"] for s in resp.json()] == [student_id]

    resp = client.get(f"/api/companies/{ObjectId()}/eligible-students", headers=admin_headers)
    assert resp.status_code == 404


def test_admin_lists_and_deletes_students(client, admin_headers, student):
    student_id, _ = student
    resp = client.get("/api/students", headers=admin_headers)
    assert resp.status_code == 200
    assert [s["email"] for s in resp.json()] == ["asha@college.edu"]

    assert client.delete(f"/api/students/{student_id}", headers=admin_headers).status_code == 200
    assert client.get("/api/students", headers=admin_headers).json() == []
    assert client.delete(f"/api/students/{student_id}", headers=admin_headers).status_code == 404


def test_admin_stats(client, admin_headers, student):
    company = add_company(client, admin_headers, "Acme")
    _, headers = student
    register_student(client, "raj@college.edu", profile=dict(FULL_PROFILE, name="Raj", gender="Male", branch="CE"))
    register_student(client, "blank@college.edu")
    client.post(f"/api/students/apply/{company['id']}", headers=headers)

    resp = client.get("/api/admin/stats", headers=admin_headers)
    assert resp.status_code == 200
    stats = resp.json()
    assert stats["totalRegistered"] == 2
    assert stats["gender"] == {"Female": 1, "Male": 1}
    assert stats["branch"] == {"IT": 1, "CE": 1}
    assert stats["totalCompanies"] == 1
    assert stats["applicationsByCompany"] == {company["id"]: 1}


def test_health(client):
    assert client.get("/").status_code == 200
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_concurrent_duplicate_company_is_rejected_by_index(client, admin_headers, mongo_db, monkeypatch):
    add_company(client, admin_headers, "Acme")
    # Lose the race: the name check misses the first insert
    monkeypatch.setattr(CompanyService, "exists_by_name", lambda self, name: False)

    resp = client.post("/api/companies", headers=admin_headers, json={
        "name": "Acme",
        "visitingDate": "2026-12-01T09:00:00",
        "eligibility": {"tenthMarks": 50, "twelfthMarks": 50, "cgpaAggregate": 6, "activeBacklog": "yes"},
    })
    assert resp.status_code == 400
    assert resp.json()["message"] == "Company with this name already exists"
    assert mongo_db["companies"].count_documents({"name": "Acme"}) == 1
