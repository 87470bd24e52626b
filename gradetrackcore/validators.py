import re

from django.core.exceptions import ValidationError
from django.core.validators import validate_email

from .grading import active_scale
from .models import Semester

NAME_RE = re.compile(r"^[A-Za-z\s]+$")
MIN_YEAR = 2000
MIN_CREDITS, MAX_CREDITS = 1, 4
COURSE_NAME_MAX = 100


class ValidationFailed(Exception):
    """Input rejected before anything is persisted. ``errors`` maps field -> message."""

    def __init__(self, errors):
        super().__init__("Validation failed")
        self.errors = errors


def _is_int(value):
    # bool is an int subclass; JSON true must not pass as 1 credit
    return isinstance(value, int) and not isinstance(value, bool)


def _check_course_name(name, errors):
    if not isinstance(name, str):
        errors["name"] = "Course name is required and must be a string"
    elif not name.strip():
        errors["name"] = "Course name cannot be empty"
    elif len(name.strip()) > COURSE_NAME_MAX:
        errors["name"] = f"Course name cannot exceed {COURSE_NAME_MAX} characters"


def _check_credits(credits, errors):
    if credits is None:
        errors["credits"] = "Credits are required"
    elif not _is_int(credits):
        errors["credits"] = "Credits must be a whole number"
    elif not MIN_CREDITS <= credits <= MAX_CREDITS:
        errors["credits"] = f"Credits must be between {MIN_CREDITS} and {MAX_CREDITS}"


def _check_grade(grade, errors):
    grades = active_scale().grades
    if not grade:
        errors["grade"] = "Grade is required"
    elif grade not in grades:
        errors["grade"] = f"Grade must be one of: {', '.join(grades)}"


def validate_course(payload):
    """Validate a new course; returns the cleaned fields."""
    errors = {}
    _check_course_name(payload.get("name"), errors)
    _check_credits(payload.get("credits"), errors)
    _check_grade(payload.get("grade"), errors)
    semester_id = payload.get("semester_id")
    if not _is_int(semester_id) or semester_id < 1:
        errors["semester_id"] = "Valid semester ID is required"
    if errors:
        raise ValidationFailed(errors)
    return {
        "name": payload["name"].strip(),
        "credits": payload["credits"],
        "grade": payload["grade"],
        "semester_id": semester_id,
    }


def validate_course_update(payload, course):
    """Validate a partial update; only fields present in ``payload`` are checked."""
    errors = {}
    cleaned = {}
    if "name" in payload:
        _check_course_name(payload["name"], errors)
        if "name" not in errors:
            cleaned["name"] = payload["name"].strip()
    if "credits" in payload:
        _check_credits(payload["credits"], errors)
        cleaned["credits"] = payload["credits"]
    if "grade" in payload:
        _check_grade(payload["grade"], errors)
        cleaned["grade"] = payload["grade"]
    if "semester_id" in payload and payload["semester_id"] != course.semester_id:
        errors["semester_id"] = "A course cannot be moved to another semester"
    if errors:
        raise ValidationFailed(errors)
    return cleaned


def validate_semester(payload):
    errors = {}
    number = payload.get("semester_number")
    year = payload.get("year")
    semester_type = payload.get("semester_type")

    if number is None or year is None or not semester_type:
        raise ValidationFailed({
            "__all__": "Semester number, year, and type are required",
        })
    if not _is_int(number) or number < 1:
        errors["semester_number"] = "Semester must be at least 1"
    if not _is_int(year) or year < MIN_YEAR:
        errors["year"] = f"Year must be {MIN_YEAR} or later"
    if semester_type not in Semester.Type.values:
        errors["semester_type"] = "Semester type must be Fall, Spring, or Summer"
    if errors:
        raise ValidationFailed(errors)
    return {"semester_number": number, "year": year, "semester_type": semester_type}


def validate_registration(payload):
    errors = {}
    name = payload.get("name")
    email = payload.get("email")
    password = payload.get("password")

    name = name.strip() if isinstance(name, str) else ""
    if not name:
        errors["name"] = "Name is required"
    elif not 2 <= len(name) <= 50:
        errors["name"] = "Name must be between 2 and 50 characters"
    elif not NAME_RE.match(name):
        errors["name"] = "Name can only contain letters and spaces"

    email = email.strip().lower() if isinstance(email, str) else ""
    try:
        validate_email(email)
    except ValidationError:
        errors["email"] = "Please provide a valid email address"
    else:
        if len(email) > 100:
            errors["email"] = "Email is too long"

    if not isinstance(password, str) or len(password) < 6:
        errors["password"] = "Password must be at least 6 characters"
    elif not (re.search(r"[a-z]", password) and re.search(r"[A-Z]", password)
              and re.search(r"\d", password)):
        errors["password"] = (
            "Password must contain at least one uppercase letter, "
            "one lowercase letter, and one number"
        )
    if payload.get("password_confirm") != password:
        errors["password_confirm"] = "Passwords do not match"

    if errors:
        raise ValidationFailed(errors)
    return {"name": name, "email": email, "password": password}


def validate_login(payload):
    errors = {}
    email = payload.get("email")
    password = payload.get("password")
    email = email.strip().lower() if isinstance(email, str) else ""
    try:
        validate_email(email)
    except ValidationError:
        errors["email"] = "Please provide a valid email address"
    if not isinstance(password, str) or not password:
        errors["password"] = "Password is required"
    if errors:
        raise ValidationFailed(errors)
    return {"email": email, "password": password}
