"""API v1 router."""
from fastapi import APIRouter

from quizdesk.api.v1 import admin_quizzes, auth, dashboard, results, student_quizzes

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(admin_quizzes.router, prefix="/admin/quizzes", tags=["Admin Quizzes"])
api_router.include_router(results.admin_router, prefix="/admin/results", tags=["Admin Results"])
api_router.include_router(student_quizzes.router, prefix="/student/quizzes", tags=["Student Quizzes"])
api_router.include_router(results.student_router, prefix="/student/results", tags=["Student Results"])
