# gradetrackcore/views.py
import json
import logging
from datetime import date

from django.db import IntegrityError, connection, transaction
from django.http import HttpResponse, JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt

from . import grading, reports, validators
from .auth import create_access_token, token_required
from .models import Course, Semester, Student, normalize_email

logger = logging.getLogger(__name__)


# --- helpers ---

def _error(message, status, code, **extra):
    return JsonResponse({"error": message, "code": code, **extra}, status=status)


def _method_not_allowed(*allowed):
    return _error(f"{' or '.join(allowed)} only", 405, "METHOD_NOT_ALLOWED")


def _validation_error(exc):
    return _error("Validation failed", 400, "VALIDATION_ERROR", errors=exc.errors)


def _read_json(request):
    try:
        payload = json.loads(request.body or b"{}")
    except (ValueError, UnicodeDecodeError):
        return None
    return payload if isinstance(payload, dict) else None


def _owned(model, pk, student_id, label):
    """
    Fetch ``model`` by pk for ``student_id``.

    Returns ``(obj, None)`` or ``(None, error_response)``: 404 when the row
    does not exist, 403 when it belongs to someone else.
    """
    obj = model.objects.filter(pk=pk).first()
    if obj is None:
        return None, _error(f"{label} not found", 404, "NOT_FOUND")
    if obj.owner_id != student_id:
        return None, _error(f"Not authorized to access this {label.lower()}", 403, "FORBIDDEN")
    return obj, None


def _user_data(student):
    return {
        "id": student.id,
        "name": student.name,
        "email": student.email,
        "created_at": student.created_at.isoformat(),
    }


def _course_data(c):
    return {
        "id": c.id,
        "semester_id": c.semester_id,
        "name": c.name,
        "credits": c.credits,
        "grade": c.grade,
        "grade_value": float(c.grade_value),
        "weighted_grade_points": float(c.grade_points),
        "created_at": c.created_at.isoformat(),
    }


def _semester_data(sem, scale):
    courses = list(sem.courses.all())
    return {
        "id": sem.id,
        "semester_number": sem.semester_number,
        "year": sem.year,
        "semester_type": sem.semester_type,
        "gpa": sem.gpa,
        "gpa_calculated_at": sem.gpa_calculated_at.isoformat() if sem.gpa_calculated_at else None,
        "live_gpa": grading.semester_gpa(courses, scale),
        "course_count": len(courses),
        "courses": [_course_data(c) for c in courses],
    }


# --- health ---

def health(request):
    if request.method != "GET":
        return _method_not_allowed("GET")
    with connection.cursor() as cursor:
        cursor.execute("SELECT 1")
    return JsonResponse({"status": "ok", "database": "ok"})


# --- auth ---

@csrf_exempt
def register(request):
    """
    POST /api/auth/register/
    JSON: { "name": "...", "email": "...", "password": "...", "password_confirm": "..." }
    """
    if request.method != "POST":
        return _method_not_allowed("POST")
    payload = _read_json(request)
    if payload is None:
        return _error("Request body must be a JSON object", 400, "INVALID_JSON")

    try:
        data = validators.validate_registration(payload)
    except validators.ValidationFailed as e:
        return _validation_error(e)

    if Student.objects.filter(email=data["email"]).exists():
        return _error(
            "Email already registered. Please login or use a different email.",
            409, "EMAIL_EXISTS",
        )

    student = Student(name=data["name"], email=data["email"])
    student.set_password(data["password"])
    try:
        with transaction.atomic():
            student.save()
    except IntegrityError:
        # lost a race with a concurrent registration for the same email
        return _error(
            "Email already registered. Please login or use a different email.",
            409, "EMAIL_EXISTS",
        )

    logger.info("Registered student id=%s", student.id)
    return JsonResponse({
        "status": "ok",
        "message": "User registered successfully",
        "token": create_access_token(student.id),
        "user": _user_data(student),
    }, status=201)


@csrf_exempt
def login(request):
    """
    POST /api/auth/login/
    JSON: { "email": "...", "password": "..." }
    """
    if request.method != "POST":
        return _method_not_allowed("POST")
    payload = _read_json(request)
    if payload is None:
        return _error("Request body must be a JSON object", 400, "INVALID_JSON")

    try:
        data = validators.validate_login(payload)
    except validators.ValidationFailed as e:
        return _validation_error(e)

    student = Student.objects.filter(email=normalize_email(data["email"])).first()
    if student is None or not student.check_password(data["password"]):
        logger.info("Failed login attempt")
        return _error("Invalid credentials", 401, "INVALID_CREDENTIALS")

    return JsonResponse({
        "status": "ok",
        "message": "Logged in successfully",
        "token": create_access_token(student.id),
        "user": _user_data(student),
    })


@token_required
def me(request):
    if request.method != "GET":
        return _method_not_allowed("GET")
    student = Student.objects.filter(pk=request.student_id).first()
    if student is None:
        return _error("User not found", 404, "USER_NOT_FOUND")
    return JsonResponse({"status": "ok", "data": _user_data(student)})


# --- semesters ---

@csrf_exempt
@token_required
def semesters(request):
    """
    GET  /api/semesters/   own semesters, newest first
    POST /api/semesters/   { "semester_number": 1, "year": 2024, "semester_type": "Fall" }
    """
    scale = grading.active_scale()

    if request.method == "GET":
        qs = (Semester.objects.filter(owner_id=request.student_id)
              .prefetch_related("courses")
              .order_by("-year", "-semester_number"))
        data = [_semester_data(sem, scale) for sem in qs]
        return JsonResponse({"status": "ok", "count": len(data), "data": data})

    if request.method == "POST":
        payload = _read_json(request)
        if payload is None:
            return _error("Request body must be a JSON object", 400, "INVALID_JSON")
        try:
            data = validators.validate_semester(payload)
        except validators.ValidationFailed as e:
            return _validation_error(e)

        sem = Semester.objects.create(owner_id=request.student_id, gpa=0, **data)
        return JsonResponse({
            "status": "ok",
            "message": "Semester created successfully",
            "data": _semester_data(sem, scale),
        }, status=201)

    return _method_not_allowed("GET", "POST")


@csrf_exempt
@token_required
def semester_detail(request, semester_id):
    """GET or DELETE /api/semesters/<id>/ (delete cascades to its courses)"""
    if request.method not in ("GET", "DELETE"):
        return _method_not_allowed("GET", "DELETE")

    sem, error = _owned(Semester, semester_id, request.student_id, "Semester")
    if error:
        return error

    if request.method == "DELETE":
        sem.delete()
        return JsonResponse({"status": "ok", "message": "Semester deleted successfully"})

    return JsonResponse({"status": "ok", "data": _semester_data(sem, grading.active_scale())})


@csrf_exempt
@token_required
def calculate_semester_gpa(request, semester_id):
    """
    PATCH /api/semesters/<id>/calculate-gpa/

    Recompute the semester GPA from its courses and store it as the cached
    value. Nothing else writes ``Semester.gpa``.
    """
    if request.method != "PATCH":
        return _method_not_allowed("PATCH")

    sem, error = _owned(Semester, semester_id, request.student_id, "Semester")
    if error:
        return error

    sem.gpa = grading.semester_gpa(sem.courses.all())
    sem.gpa_calculated_at = timezone.now()
    sem.save(update_fields=["gpa", "gpa_calculated_at", "updated_at"])
    logger.info("Recomputed GPA for semester id=%s: %.2f", sem.id, sem.gpa)

    return JsonResponse({
        "status": "ok",
        "message": "Semester GPA calculated",
        "data": {
            "semester_id": sem.id,
            "gpa": sem.gpa,
            "gpa_calculated_at": sem.gpa_calculated_at.isoformat(),
        },
    })


@token_required
def cgpa_analytics(request):
    """GET /api/semesters/analytics/cgpa/  CGPA plus a per-semester breakdown, oldest first."""
    if request.method != "GET":
        return _method_not_allowed("GET")

    scale = grading.active_scale()
    qs = (Semester.objects.filter(owner_id=request.student_id)
          .prefetch_related("courses")
          .order_by("year", "semester_number"))
    per_semester = [(sem, list(sem.courses.all())) for sem in qs]

    return JsonResponse({
        "status": "ok",
        "data": {
            "cgpa": grading.cgpa([courses for _, courses in per_semester], scale),
            "semester_count": len(per_semester),
            "semesters": [
                {
                    "id": sem.id,
                    "year": sem.year,
                    "semester_type": sem.semester_type,
                    "semester_number": sem.semester_number,
                    "gpa": grading.semester_gpa(courses, scale),
                    "cached_gpa": sem.gpa,
                    "course_count": len(courses),
                }
                for sem, courses in per_semester
            ],
        },
    })


# --- courses ---

@csrf_exempt
@token_required
def courses(request):
    """
    GET  /api/courses/   own courses, newest first
    POST /api/courses/   { "semester_id": 3, "name": "...", "credits": 3, "grade": "B" }
    """
    if request.method == "GET":
        qs = (Course.objects.filter(owner_id=request.student_id)
              .select_related("semester")
              .order_by("-created_at", "-id"))
        data = []
        for c in qs:
            item = _course_data(c)
            item["semester"] = {
                "id": c.semester.id,
                "semester_number": c.semester.semester_number,
                "year": c.semester.year,
                "semester_type": c.semester.semester_type,
            }
            data.append(item)
        return JsonResponse({"status": "ok", "count": len(data), "data": data})

    if request.method == "POST":
        payload = _read_json(request)
        if payload is None:
            return _error("Request body must be a JSON object", 400, "INVALID_JSON")
        try:
            data = validators.validate_course(payload)
        except validators.ValidationFailed as e:
            return _validation_error(e)

        sem, error = _owned(Semester, data.pop("semester_id"), request.student_id, "Semester")
        if error:
            return error

        c = Course.objects.create(owner_id=request.student_id, semester=sem, **data)
        return JsonResponse({
            "status": "ok",
            "message": "Course created successfully",
            "data": _course_data(c),
        }, status=201)

    return _method_not_allowed("GET", "POST")


@csrf_exempt
@token_required
def course_detail(request, course_id):
    """GET, PUT (partial update of name/credits/grade) or DELETE /api/courses/<id>/"""
    if request.method not in ("GET", "PUT", "DELETE"):
        return _method_not_allowed("GET", "PUT", "DELETE")

    course, error = _owned(Course, course_id, request.student_id, "Course")
    if error:
        return error

    if request.method == "GET":
        return JsonResponse({"status": "ok", "data": _course_data(course)})

    if request.method == "DELETE":
        data = _course_data(course)
        course.delete()
        return JsonResponse({
            "status": "ok", "message": "Course deleted successfully", "data": data,
        })

    payload = _read_json(request)
    if payload is None:
        return _error("Request body must be a JSON object", 400, "INVALID_JSON")
    try:
        changes = validators.validate_course_update(payload, course)
    except validators.ValidationFailed as e:
        return _validation_error(e)

    for field, value in changes.items():
        setattr(course, field, value)
    course.save()
    return JsonResponse({
        "status": "ok",
        "message": "Course updated successfully",
        "data": _course_data(course),
    })


@token_required
def course_summary(request):
    """GET /api/courses/stats/summary/"""
    if request.method != "GET":
        return _method_not_allowed("GET")

    report = grading.summary(Course.objects.filter(owner_id=request.student_id))
    return JsonResponse({
        "status": "ok",
        "data": report.as_dict(),
        "meta": {"calculated_at": timezone.now().isoformat()},
    })


# --- PDF reports ---

@token_required
def full_report_pdf(request):
    if request.method != "GET":
        return _method_not_allowed("GET")

    student = Student.objects.filter(pk=request.student_id).first()
    if student is None:
        return _error("User not found", 404, "USER_NOT_FOUND")
    semesters_qs = (student.semesters.prefetch_related("courses")
                    .order_by("year", "semester_number"))

    response = HttpResponse(content_type="application/pdf")
    response["Content-Disposition"] = (
        f'attachment; filename="GPA-Report-{date.today().isoformat()}.pdf"'
    )
    reports.build_full_report(response, student, semesters_qs)
    return response


@token_required
def semester_report_pdf(request, semester_id):
    if request.method != "GET":
        return _method_not_allowed("GET")

    sem, error = _owned(Semester, semester_id, request.student_id, "Semester")
    if error:
        return error

    response = HttpResponse(content_type="application/pdf")
    response["Content-Disposition"] = (
        f'attachment; filename="Semester-Report-{sem.semester_type}-{sem.year}.pdf"'
    )
    reports.build_semester_report(response, sem.owner, sem)
    return response


def api_not_found(request, exception=None):
    return _error(f"Route not found: {request.method} {request.path}", 404, "ROUTE_NOT_FOUND")
