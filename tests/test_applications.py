from datetime import datetime

from bson import ObjectId

from placement_portal.services.mongo_service import ApplicationService
from tests.conftest import add_company, bearer, register_student


def test_apply_creates_application_with_company(client, admin_headers, student):
    company = add_company(client, admin_headers, "Acme")
    _, headers = student

    resp = client.post(f"/api/students/apply/{company['id']}", headers=headers)
    assert resp.status_code == 201
    application = resp.json()["application"]
    assert application["status"] == "Applied"
    assert application["companyId"] == company["id"]
    assert application["company"]["name"] == "Acme"
    assert application["company"]["visitingDate"].startswith("2026-11-15")


def test_second_application_is_rejected(client, admin_headers, student, mongo_db):
    company = add_company(client, admin_headers, "Acme")
    student_id, headers = student

    assert client.post(f"/api/students/apply/{company['id']}", headers=headers).status_code == 201
    resp = client.post(f"/api/students/apply/{company['id']}", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "You have already applied to this company."

    assert mongo_db["applications"].count_documents({
        "student_id": ObjectId(student_id), "company_id": ObjectId(company["id"])
    }) == 1


def test_apply_to_unknown_company(client, student):
    _, headers = student
    assert client.post(f"/api/students/apply/{ObjectId()}", headers=headers).status_code == 404
    assert client.post("/api/students/apply/bogus", headers=headers).status_code == 400


def test_student_applications_newest_first(client, admin_headers, student, mongo_db):
    first = add_company(client, admin_headers, "First")
    second = add_company(client, admin_headers, "Second")
    _, headers = student
    client.post(f"/api/students/apply/{first['id']}", headers=headers)
    client.post(f"/api/students/apply/{second['id']}", headers=headers)

    mongo_db["applications"].update_one(
        {"company_id": ObjectId(first["id"])}, {"$set": {"date_applied": datetime(2026, 1, 1)}}
    )
    mongo_db["applications"].update_one(
        {"company_id": ObjectId(second["id"])}, {"$set": {"date_applied": datetime(2026, 2, 1)}}
    )

    resp = client.get("/api/students/applications", headers=headers)
    assert resp.status_code == 200
    assert [a["company"]["name"] for a in resp.json()] == ["Second", "First"]


def test_applications_survive_company_deletion(client, admin_headers, student):
    company = add_company(client, admin_headers, "Gone Inc")
    _, headers = student
    client.post(f"/api/students/apply/{company['id']}", headers=headers)

    assert client.delete(f"/api/companies/{company['id']}", headers=admin_headers).status_code == 200

    resp = client.get("/api/students/applications", headers=headers)
    assert resp.status_code == 200
    [application] = resp.json()
    assert application["companyId"] == company["id"]
    assert application["company"] is None


def test_admin_sees_all_applications_enriched(client, admin_headers, student):
    company = add_company(client, admin_headers, "Acme")
    _, headers = student
    other = register_student(client, "other@college.edu")
    client.post(f"/api/students/apply/{company['id']}", headers=headers)
    client.post(f"/api/students/apply/{company['id']}", headers=bearer(other["token"]))

    resp = client.get("/api/admin/applications/all", headers=admin_headers)
    assert resp.status_code == 200
    applications = resp.json()
    assert len(applications) == 2
    by_email = {a["student"]["email"]: a for a in applications}
    assert by_email["asha@college.edu"]["student"]["name"] == "Asha Patil"
    assert by_email["asha@college.edu"]["student"]["branch"] == "IT"
    assert all(a["company"]["name"] == "Acme" for a in applications)


def test_admin_applications_route_requires_admin(client, student):
    _, headers = student
    assert client.get("/api/admin/applications/all", headers=headers).status_code == 403


def test_concurrent_second_application_is_rejected_by_index(client, admin_headers, student, mongo_db, monkeypatch):
    company = add_company(client, admin_headers, "Acme")
    student_id, headers = student
    assert client.post(f"/api/students/apply/{company['id']}", headers=headers).status_code == 201

    # Lose the race: the existence check misses the first application
    monkeypatch.setattr(ApplicationService, "find_one", lambda self, student_id, company_id: None)

    resp = client.post(f"/api/students/apply/{company['id']}", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "You have already applied to this company."
    assert mongo_db["applications"].count_documents({
        "student_id": ObjectId(student_id), "company_id": ObjectId(company["id"])
    }) == 1
