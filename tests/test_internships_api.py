from datetime import datetime, timedelta

from conftest import as_caller, auth_header

from app.services.mongo_service import ApplicationStore, InternshipStore
from app.utils.dates import utcnow


def posting(**overrides):
    body = {
        "title": "Frontend Intern",
        "companyName": "Acme",
        "description": "React work",
        "location": "Hyderabad",
        "deadline": (utcnow() + timedelta(days=1)).isoformat(),
        "domain": ["Web Development"],
        "skills": ["React"],
        "branch": ["CSE"],
    }
    body.update(overrides)
    return body


# ------------------------------------------------------------
# Create / read / update / delete
# ------------------------------------------------------------

def test_ccpd_creates_internship(client, make_user):
    ccpd = make_user(role="ccpd")
    res = client.post("/api/internships", json=posting(cgpaCutoff=7.5), headers=auth_header(ccpd))
    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "Internship posted successfully"
    assert body["internship"]["companyName"] == "Acme"
    assert body["internship"]["cgpaCutoff"] == 7.5
    assert body["internship"]["type"] == "full-time"
    assert body["internship"]["postedBy"] == str(ccpd["_id"])


def test_student_cannot_create_internship(client, make_user):
    res = client.post("/api/internships", json=posting(), headers=auth_header(make_user()))
    assert res.status_code == 403
    assert "message" in res.json()


def test_create_requires_fields(client, make_user):
    body = posting()
    del body["deadline"]
    res = client.post("/api/internships", json=body, headers=auth_header(make_user(role="admin")))
    assert res.status_code == 400


def test_create_rejects_out_of_range_cgpa(client, make_user):
    res = client.post("/api/internships", json=posting(cgpaCutoff=11), headers=auth_header(make_user(role="admin")))
    assert res.status_code == 400


def test_get_internship(client, make_internship):
    doc = make_internship(title="Backend Intern")
    res = client.get(f"/api/internships/{doc['_id']}")
    assert res.status_code == 200
    assert res.json()["title"] == "Backend Intern"
    assert res.json()["id"] == str(doc["_id"])


def test_timestamps_carry_utc_offset(client, make_internship):
    doc = make_internship(deadline=datetime(2031, 5, 1, 12, 30))
    body = client.get(f"/api/internships/{doc['_id']}").json()
    assert body["deadline"] == "2031-05-01T12:30:00Z"
    assert body["createdAt"].endswith("Z")


def test_aware_deadline_is_stored_as_utc(client, make_user):
    res = client.post(
        "/api/internships",
        json=posting(deadline="2031-05-01T18:00:00+05:30"),
        headers=auth_header(make_user(role="ccpd")),
    )
    assert res.json()["internship"]["deadline"] == "2031-05-01T12:30:00Z"


def test_get_missing_or_malformed_internship(client):
    assert client.get("/api/internships/64b7f0c2a1b2c3d4e5f60718").status_code == 404
    res = client.get("/api/internships/not-an-id")
    assert res.status_code == 404
    assert res.json()["message"] == "Internship not found"


def test_update_internship_partial(client, make_user, make_internship):
    doc = make_internship(title="Old", salary="10k")
    res = client.put(
        f"/api/internships/{doc['_id']}",
        json={"title": "New", "branch": ["ECE"]},
        headers=auth_header(make_user(role="ccpd")),
    )
    assert res.status_code == 200
    assert res.json()["title"] == "New"
    assert res.json()["branch"] == ["ECE"]
    assert res.json()["salary"] == "10k"


def test_update_missing_internship(client, make_user):
    res = client.put(
        "/api/internships/64b7f0c2a1b2c3d4e5f60718",
        json={"title": "New"},
        headers=auth_header(make_user(role="ccpd")),
    )
    assert res.status_code == 404


def test_student_cannot_update_or_delete(client, make_user, make_internship):
    doc = make_internship()
    headers = auth_header(make_user())
    assert client.put(f"/api/internships/{doc['_id']}", json={"title": "x"}, headers=headers).status_code == 403
    assert client.delete(f"/api/internships/{doc['_id']}", headers=headers).status_code == 403


def test_delete_cascades_to_applications(client, make_user, make_internship):
    doc = make_internship()
    other = make_internship(title="Other")
    for _ in range(3):
        ApplicationStore().insert(make_user()["_id"], doc["_id"], "Applied")
    ApplicationStore().insert(make_user()["_id"], other["_id"], "Applied")
    ccpd = make_user(role="ccpd")

    res = client.delete(f"/api/internships/{doc['_id']}", headers=auth_header(ccpd))
    assert res.status_code == 200
    assert res.json()["message"] == "Internship and associated applications deleted successfully"

    assert InternshipStore().get_by_id(doc["_id"]) is None
    assert ApplicationStore().count_by_internship(doc["_id"]) == 0
    assert ApplicationStore().count_by_internship(other["_id"]) == 1

    listed = client.get(f"/api/applications/internship/{doc['_id']}", headers=auth_header(ccpd))
    assert listed.status_code == 200
    assert listed.json() == []


def test_delete_missing_internship(client, make_user):
    res = client.delete("/api/internships/64b7f0c2a1b2c3d4e5f60718", headers=auth_header(make_user(role="admin")))
    assert res.status_code == 404


def test_mine_lists_only_own_postings(client, make_user, make_internship):
    ccpd = make_user(role="ccpd")
    make_internship(title="Mine 1", posted_by=ccpd["_id"])
    make_internship(title="Mine 2", posted_by=ccpd["_id"])
    make_internship(title="Someone else's", posted_by=make_user(role="admin")["_id"])

    res = client.get("/api/internships/mine", headers=auth_header(ccpd))
    assert res.status_code == 200
    assert [i["title"] for i in res.json()] == ["Mine 2", "Mine 1"]


# ------------------------------------------------------------
# Listing
# ------------------------------------------------------------

def test_list_shape_and_pagination(client, make_internship):
    for i in range(12):
        make_internship(title=f"Posting {i}")

    res = client.get("/api/internships", params={"page": 2, "limit": 5})
    assert res.status_code == 200
    body = res.json()
    assert body["currentPage"] == 2
    assert body["totalPages"] == 3
    assert body["totalItems"] == 12
    assert [i["title"] for i in body["internships"]] == [f"Posting {i}" for i in range(6, 1, -1)]


def test_list_defaults(client, make_internship):
    for i in range(11):
        make_internship(title=f"Posting {i}")
    body = client.get("/api/internships").json()
    assert body["currentPage"] == 1
    assert len(body["internships"]) == 10


def test_list_empty(client):
    body = client.get("/api/internships").json()
    assert body == {"internships": [], "currentPage": 1, "totalPages": 0, "totalItems": 0}


def test_list_rejects_bad_page_and_limit(client):
    assert client.get("/api/internships", params={"page": 0}).status_code == 400
    assert client.get("/api/internships", params={"limit": 0}).status_code == 400
    assert client.get("/api/internships", params={"limit": 1000}).status_code == 400

    res = client.get("/api/internships", params={"page": str(10 ** 19)})
    assert res.status_code == 400
    assert res.json()["message"] == "page is out of range"


def test_non_numeric_cgpa_is_ignored(client, make_internship):
    make_internship(title="A", cgpa_cutoff=7.0)
    make_internship(title="B", cgpa_cutoff=8.0)

    plain = client.get("/api/internships").json()
    ignored = client.get("/api/internships", params={"cgpaCutoff": "abc"}).json()
    assert ignored == plain

    filtered = client.get("/api/internships", params={"cgpaCutoff": "8"}).json()
    assert [i["title"] for i in filtered["internships"]] == ["B"]


def test_list_filters_combine(client, make_internship):
    make_internship(title="Web at Acme", company_name="Acme", location="Pune", domain=["Web Development"])
    make_internship(title="ML at Acme", company_name="Acme", location="Remote", domain=["Machine Learning"])
    make_internship(title="Web at Beta", company_name="Beta", location="Pune", domain=["Web Development"])

    res = client.get("/api/internships", params={"company": "acme", "domain": "web"}).json()
    assert [i["title"] for i in res["internships"]] == ["Web at Acme"]

    res = client.get("/api/internships", params={"q": "pune"}).json()
    assert res["totalItems"] == 2


def test_branch_scoping_by_caller(client, make_user, make_internship):
    make_internship(title="CSE only", branch=["CSE"])
    make_internship(title="ECE only", branch=["ECE"])
    make_internship(title="Open", branch=[])

    cse = client.get("/api/internships", headers=auth_header(make_user(branch="CSE"))).json()
    assert sorted(i["title"] for i in cse["internships"]) == ["CSE only", "Open"]

    staff = client.get("/api/internships", headers=auth_header(make_user(role="ccpd"))).json()
    assert staff["totalItems"] == 3

    anonymous = client.get("/api/internships").json()
    assert anonymous["totalItems"] == 3


# ------------------------------------------------------------
# Filter options
# ------------------------------------------------------------

def test_filter_options(client, make_internship):
    make_internship(company_name="Beta", location="Pune", domain=["Web", "AI"], cgpa_cutoff=8.0)
    make_internship(company_name="Acme", location="Delhi", domain=["AI"], cgpa_cutoff=6.5)
    make_internship(company_name="Acme", location="Delhi", domain=[], cgpa_cutoff=None)

    res = client.get("/api/filter-options")
    assert res.status_code == 200
    assert res.json() == {
        "domains": ["AI", "Web"],
        "locations": ["Delhi", "Pune"],
        "companyNames": ["Acme", "Beta"],
        "cgpaCutoffs": [6.5, 8.0],
    }


def test_service_listing_hides_other_branch_postings(make_user, make_internship):
    from app.services import internship_service
    from app.services.query_builder import InternshipFilters

    make_internship(title="CSE only", branch=["CSE"])
    ece = as_caller(make_user(branch="ECE"))
    result = internship_service.list_internships(InternshipFilters(), ece, 1, 10)
    assert result.total_items == 0
