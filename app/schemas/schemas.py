"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Fields are snake_case in Python and camelCase on the wire.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, PlainSerializer
from pydantic.alias_generators import to_camel
from typing import Annotated, Optional, List
from datetime import datetime
from enum import Enum

from app.utils.dates import to_utc_iso

# Stored naive UTC; sent as ISO 8601 with a Z suffix
UtcDatetime = Annotated[datetime, PlainSerializer(to_utc_iso, return_type=str, when_used="json")]


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    ccpd = "ccpd"
    admin = "admin"


class Branch(str, Enum):
    cse = "CSE"
    ece = "ECE"
    eee = "EEE"
    mnc = "Mathematics & Computing"
    mechanical = "Mechanical"
    civil = "Civil"
    chemical = "Chemical"
    biotechnology = "Biotechnology"


class InternshipType(str, Enum):
    full_time = "full-time"
    part_time = "part-time"
    remote = "remote"


class ApplicationStatus(str, Enum):
    applied = "Applied"
    under_review = "Under Review"
    shortlisted = "Shortlisted"
    interviewing = "Interviewing"
    offered = "Offered"
    not_selected = "Not Selected"
    withdrawn = "Withdrawn"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# AUTH / USER SCHEMAS
# ============================================================

class CurrentUser(BaseModel):
    """Caller identity resolved from the bearer token for one request."""
    user_id: str
    name: str
    email: str
    role: str
    branch: Optional[str] = None

class RegisterRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.student
    branch: Optional[Branch] = None
    ccpd_code: Optional[str] = None

class LoginRequest(CamelModel):
    email: EmailStr
    password: str

class UserPublic(CamelModel):
    id: str
    name: str
    email: str
    role: str
    branch: Optional[str] = None
    profile_pic: str = ""
    created_at: Optional[UtcDatetime] = None

class AuthResponse(CamelModel):
    token: str
    user: UserPublic

class ProfileUpdate(CamelModel):
    name: str

class PasswordUpdate(CamelModel):
    current_password: str
    new_password: str

class UserUpdateResponse(CamelModel):
    message: str
    user: UserPublic


# ============================================================
# INTERNSHIP SCHEMAS
# ============================================================

class InternshipCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    company_name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    type: InternshipType = InternshipType.full_time
    salary: Optional[str] = None
    cgpa_cutoff: Optional[float] = Field(None, ge=0, le=10)
    deadline: datetime
    domain: List[str] = []
    skills: List[str] = []
    branch: List[Branch] = []
    internship_period: Optional[str] = None
    company_logo_url: str = ""
    responsibilities: str = ""
    about_company: str = ""

class InternshipUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    company_name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    type: Optional[InternshipType] = None
    salary: Optional[str] = None
    cgpa_cutoff: Optional[float] = Field(None, ge=0, le=10)
    deadline: Optional[datetime] = None
    domain: Optional[List[str]] = None
    skills: Optional[List[str]] = None
    branch: Optional[List[Branch]] = None
    internship_period: Optional[str] = None
    company_logo_url: Optional[str] = None
    responsibilities: Optional[str] = None
    about_company: Optional[str] = None

class InternshipResponse(CamelModel):
    id: str
    title: str
    company_name: str
    description: str
    location: str
    type: str = InternshipType.full_time.value
    salary: Optional[str] = None
    cgpa_cutoff: Optional[float] = None
    deadline: UtcDatetime
    domain: List[str] = []
    skills: List[str] = []
    branch: List[str] = []
    internship_period: Optional[str] = None
    company_logo_url: str = ""
    responsibilities: str = ""
    about_company: str = ""
    posted_by: Optional[str] = None
    created_at: Optional[UtcDatetime] = None
    updated_at: Optional[UtcDatetime] = None

class InternshipListResponse(CamelModel):
    internships: List[InternshipResponse]
    current_page: int
    total_pages: int
    total_items: int

class InternshipCreatedResponse(CamelModel):
    message: str
    internship: InternshipResponse

class FilterOptionsResponse(CamelModel):
    domains: List[str]
    locations: List[str]
    company_names: List[str]
    cgpa_cutoffs: List[float]


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(CamelModel):
    internship_id: str = Field(..., min_length=1)
    resume_url: Optional[str] = None

class ApplicationStatusUpdate(CamelModel):
    # Checked against ApplicationStatus by the service so the caller gets
    # the list of allowed values back
    status: str

class InternshipSummary(CamelModel):
    id: str
    title: str
    company_name: str
    domain: Optional[List[str]] = None
    location: Optional[str] = None
    deadline: Optional[UtcDatetime] = None

class StudentSummary(CamelModel):
    id: str
    name: str
    email: str
    branch: Optional[str] = None
    profile_pic: str = ""

class ApplicationResponse(CamelModel):
    id: str
    student_id: str
    internship_id: str
    status: str
    resume_url: Optional[str] = None
    applied_at: UtcDatetime
    updated_at: Optional[UtcDatetime] = None
    internship: Optional[InternshipSummary] = None
    student: Optional[StudentSummary] = None


# ============================================================
# ANALYTICS SCHEMAS
# ============================================================

class AnalyticsSummary(CamelModel):
    total_internships: int
    total_applications: int
    total_users: int
    unique_companies: int

class DomainStat(CamelModel):
    domain: str
    count: int

class UserGrowthPoint(CamelModel):
    date: str
    user_signups: int

class InternshipGrowthPoint(CamelModel):
    date: str
    internships_posted: int

class PlatformGrowth(CamelModel):
    user_growth: List[UserGrowthPoint]
    internship_growth: List[InternshipGrowthPoint]
    days: int

class PopularInternship(CamelModel):
    internship_id: str
    title: str
    company_name: str
    application_count: int

class StatusCount(CamelModel):
    status: str
    count: int


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
