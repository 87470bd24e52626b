"""
URL configuration for gradetrack project.

Every API route lives under /api/ and answers with JSON, including the 404
for unknown routes.
"""

from django.contrib import admin # Admin panel
from django.urls import path # URL routing
from gradetrackcore import views

urlpatterns = [
    path("admin/", admin.site.urls), # Admin panel
    path("api/health/", views.health, name="health"),

    # Auth
    path("api/auth/register/", views.register, name="register"),
    path("api/auth/login/", views.login, name="login"),
    path("api/auth/me/", views.me, name="me"),

    # Semesters
    path("api/semesters/", views.semesters, name="semesters"),
    path("api/semesters/analytics/cgpa/", views.cgpa_analytics, name="cgpa_analytics"),
    path("api/semesters/<int:semester_id>/", views.semester_detail, name="semester_detail"),
    path("api/semesters/<int:semester_id>/calculate-gpa/", views.calculate_semester_gpa,
         name="calculate_semester_gpa"),

    # Courses
    path("api/courses/", views.courses, name="courses"),
    path("api/courses/stats/summary/", views.course_summary, name="course_summary"),
    path("api/courses/<int:course_id>/", views.course_detail, name="course_detail"),

    # PDF reports
    path("api/reports/pdf/full-report/", views.full_report_pdf, name="full_report_pdf"),
    path("api/reports/pdf/semester/<int:semester_id>/", views.semester_report_pdf,
         name="semester_report_pdf"),
]

handler404 = "gradetrackcore.views.api_not_found"
