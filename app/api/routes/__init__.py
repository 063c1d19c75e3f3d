"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from app.api.routes.auth_routes import router as auth_router
from app.api.routes.user_routes import router as user_router
from app.api.routes.internship_routes import router as internship_router
from app.api.routes.application_routes import router as application_router
from app.api.routes.analytics_routes import router as analytics_router
from app.api.routes.filter_option_routes import router as filter_option_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(user_router)
api_router.include_router(internship_router)
api_router.include_router(application_router)
api_router.include_router(analytics_router)
api_router.include_router(filter_option_router)
