from django.contrib import admin
from .models import Student, Semester, Course


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ("name", "email", "created_at")
    search_fields = ("name", "email")
    exclude = ("password_hash",)


@admin.register(Semester)
class SemesterAdmin(admin.ModelAdmin):
    list_display = ("__str__", "owner", "gpa", "gpa_calculated_at", "live_gpa")
    list_filter = ("semester_type", "year")


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ("name", "grade", "credits", "semester", "owner")
    list_filter = ("grade",)
    search_fields = ("name",)
