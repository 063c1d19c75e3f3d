"""
InternHub
Internship placement platform for students, CCPD staff and admins.

Architecture:
- FastAPI: REST API under /api
- MongoDB: users, internships, applications
"""

__version__ = "1.0.0"
