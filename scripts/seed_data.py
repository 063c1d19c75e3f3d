#!/usr/bin/env python3
"""
Seed Script

Loads a small demo dataset: one CCPD account, a few students across
branches, some postings and applications. Goes through the service layer
so the same validation and permission rules apply as over HTTP.

Run: python scripts/seed_data.py [--reset]
"""
import sys
sys.path.insert(0, '.')

from datetime import timedelta

from app.core.config import get_settings
from app.core.errors import ConflictError
from app.db.mongodb import COLLECTIONS, get_mongo_db, init_mongo_indexes
from app.schemas.schemas import CurrentUser, InternshipCreate, RegisterRequest
from app.services import application_service, internship_service, user_service
from app.services.query_builder import InternshipFilters
from app.utils.dates import utcnow

PASSWORD = "password123"

STUDENTS = [
    ("Asha Reddy", "asha@student.nitw.ac.in", "CSE"),
    ("Ravi Kumar", "ravi@student.nitw.ac.in", "ECE"),
    ("Meena Iyer", "meena@student.nitw.ac.in", "EEE"),
]

POSTINGS = [
    {
        "title": "Backend Engineering Intern",
        "company_name": "Acme Systems",
        "description": "Build REST services in Python and MongoDB.",
        "location": "Hyderabad",
        "salary": "40k/month",
        "cgpa_cutoff": 7.5,
        "domain": ["Web Development"],
        "skills": ["Python", "FastAPI", "MongoDB"],
        "branch": ["CSE"],
        "internship_period": "6 months",
    },
    {
        "title": "VLSI Design Intern",
        "company_name": "Siliconix",
        "description": "RTL design and verification.",
        "location": "Bangalore",
        "cgpa_cutoff": 8.0,
        "domain": ["VLSI"],
        "skills": ["Verilog"],
        "branch": ["ECE", "EEE"],
    },
    {
        "title": "Data Science Intern",
        "company_name": "DataWorks",
        "description": "Feature engineering and model evaluation.",
        "location": "Remote",
        "type": "part-time",
        "domain": ["Machine Learning", "Data Science"],
        "skills": ["Python", "Pandas"],
        "branch": [],
    },
]


def as_caller(user) -> CurrentUser:
    return CurrentUser(user_id=user.id, name=user.name, email=user.email, role=user.role, branch=user.branch)


def register(**fields):
    try:
        _, user = user_service.register(RegisterRequest(password=PASSWORD, **fields))
    except ConflictError:
        _, user = user_service.login(fields["email"], PASSWORD)
    return user


def main():
    settings = get_settings()
    db = get_mongo_db()

    if "--reset" in sys.argv:
        print("\n[0] Dropping collections...")
        for name in COLLECTIONS.values():
            db.drop_collection(name)
            print(f"    🗑  {name}")
    init_mongo_indexes()

    print("\n[1] Creating users...")
    ccpd = register(name="CCPD Office", email="ccpd@nitw.ac.in", role="ccpd", ccpd_code=settings.staff_verification_code)
    print(f"    ✅ {ccpd.email} ({ccpd.role})")
    students = []
    for name, email, branch in STUDENTS:
        student = register(name=name, email=email, role="student", branch=branch)
        students.append(student)
        print(f"    ✅ {student.email} ({student.branch})")

    print("\n[2] Posting internships...")
    staff = as_caller(ccpd)
    deadline = utcnow() + timedelta(days=30)
    for fields in POSTINGS:
        posting = internship_service.create_internship(InternshipCreate(deadline=deadline, **fields), staff)
        print(f"    ✅ {posting.title} @ {posting.company_name}")

    print("\n[3] Applying...")
    for student in students:
        caller = as_caller(student)
        visible = internship_service.list_internships(
            InternshipFilters(), caller, 1, settings.max_page_size
        )
        for posting in visible.internships:
            try:
                application_service.submit_application(caller, posting.id)
                print(f"    ✅ {student.name} -> {posting.title}")
            except ConflictError:
                print(f"    ⚠️  {student.name} already applied to {posting.title}")

    print("\nSeed complete!")


if __name__ == "__main__":
    main()
