# gradetrackcore/grading.py
"""
Grade-point scales and the GPA / CGPA / statistics folds.

Everything here is a pure function of its input. Courses are duck-typed:
anything with ``credits`` and ``grade`` attributes works, so model
instances and plain objects in tests go through the same code.
"""
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from types import MappingProxyType

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured, ValidationError


class DataIntegrityError(Exception):
    """A grade outside the active scale reached the aggregation code."""


class Grade(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


@dataclass(frozen=True)
class GradeScale:
    name: str
    points: MappingProxyType
    failing: str = Grade.F.value

    @property
    def grades(self):
        return tuple(self.points)

    def point_value(self, grade):
        key = grade.value if isinstance(grade, Grade) else grade
        try:
            return self.points[key]
        except (KeyError, TypeError):
            raise DataIntegrityError(
                f"Grade {grade!r} is not on the {self.name} scale"
            ) from None


def _scale(name, table):
    return GradeScale(
        name=name,
        points=MappingProxyType({k: Decimal(v) for k, v in table}),
    )


# The standard scale is exactly the closed Grade enumeration.
STANDARD_SCALE = _scale("standard", [
    (g.value, points) for g, points in zip(Grade, ("4.0", "3.0", "2.0", "1.0", "0.0"))
])

PLUS_MINUS_SCALE = _scale("plus_minus", [
    ("A", "4.0"), ("A-", "3.7"),
    ("B+", "3.3"), ("B", "3.0"), ("B-", "2.7"),
    ("C+", "2.3"), ("C", "2.0"), ("C-", "1.7"),
    ("D+", "1.3"), ("D", "1.0"),
    ("F", "0.0"),
])

SCALES = {s.name: s for s in (STANDARD_SCALE, PLUS_MINUS_SCALE)}


def get_scale(name):
    try:
        return SCALES[name]
    except KeyError:
        raise ImproperlyConfigured(
            f"Unknown GRADE_SCALE {name!r}; expected one of {', '.join(SCALES)}"
        ) from None


def active_scale():
    """The scale selected by settings.GRADE_SCALE (``standard`` if unset)."""
    return get_scale(getattr(settings, "GRADE_SCALE", STANDARD_SCALE.name))


def validate_grade(value):
    """Model field validator: the grade must be on the active scale."""
    grades = active_scale().grades
    if value not in grades:
        raise ValidationError(
            "Grade must be one of: %(grades)s",
            code="invalid_grade",
            params={"grades": ", ".join(grades)},
        )


def _round_half_up(value, places):
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def round2(value):
    """Round half away from zero to two decimals and return a float."""
    return float(_round_half_up(value, 2))


def weighted_points(grade, credits, scale=None):
    """``scale[grade] * credits``, exact. Unknown grades raise DataIntegrityError."""
    scale = scale or active_scale()
    return scale.point_value(grade) * credits


def _totals(courses, scale):
    total_credits = 0
    total_points = Decimal(0)
    for c in courses:
        total_points += weighted_points(c.grade, c.credits, scale)
        total_credits += c.credits
    return total_credits, total_points


def _gpa(total_credits, total_points):
    if total_credits == 0:
        return 0.0
    return round2(total_points / total_credits)


def semester_gpa(courses, scale=None):
    scale = scale or active_scale()
    return _gpa(*_totals(courses, scale))


def cgpa(semesters, scale=None):
    """
    Cumulative GPA over every course of every semester.

    ``semesters`` is an iterable of per-semester course collections. The
    courses are pooled, so a heavy semester weighs more than a light one;
    this is not the mean of the semester GPAs.
    """
    scale = scale or active_scale()
    total_credits = 0
    total_points = Decimal(0)
    for courses in semesters:
        credits, points = _totals(courses, scale)
        total_credits += credits
        total_points += points
    return _gpa(total_credits, total_points)


PERFORMANCE_LEVELS = (
    (3.5, "Excellent"),
    (3.0, "Good"),
    (2.5, "Satisfactory"),
    (2.0, "Fair"),
)
NO_COURSES_LEVEL = "N/A"
LOWEST_LEVEL = "Needs Improvement"


def performance_level(gpa, course_count=1):
    if course_count == 0:
        return NO_COURSES_LEVEL
    for threshold, label in PERFORMANCE_LEVELS:
        if gpa >= threshold:
            return label
    return LOWEST_LEVEL


@dataclass
class StatsReport:
    gpa: float = 0.0
    total_courses: int = 0
    total_credits: int = 0
    grade_distribution: dict = field(default_factory=dict)
    credit_distribution: dict = field(default_factory=dict)
    passed: int = 0
    failed: int = 0
    pass_rate: int = 0
    performance_level: str = NO_COURSES_LEVEL
    average_credits_per_course: float = 0.0
    scale: str = STANDARD_SCALE.name

    def as_dict(self):
        return {
            "gpa": self.gpa,
            "total_courses": self.total_courses,
            "total_credits": self.total_credits,
            "grade_distribution": dict(self.grade_distribution),
            "credit_distribution": dict(self.credit_distribution),
            "passed": self.passed,
            "failed": self.failed,
            "pass_rate": self.pass_rate,
            "performance_level": self.performance_level,
            "average_credits_per_course": self.average_credits_per_course,
            "scale": self.scale,
        }


def summary(courses, scale=None):
    scale = scale or active_scale()
    grade_distribution = dict.fromkeys(scale.grades, 0)
    credit_distribution = dict.fromkeys(scale.grades, 0)
    total_credits = 0
    total_points = Decimal(0)
    total_courses = 0

    for c in courses:
        total_points += weighted_points(c.grade, c.credits, scale)
        key = c.grade.value if isinstance(c.grade, Grade) else c.grade
        grade_distribution[key] += 1
        credit_distribution[key] += c.credits
        total_credits += c.credits
        total_courses += 1

    gpa = _gpa(total_credits, total_points)
    failed = grade_distribution.get(scale.failing, 0)
    passed = total_courses - failed

    if total_courses:
        pass_rate = int(_round_half_up(Decimal(100 * passed) / total_courses, 0))
        average = round2(Decimal(total_credits) / total_courses)
    else:
        pass_rate = 0
        average = 0.0

    return StatsReport(
        gpa=gpa,
        total_courses=total_courses,
        total_credits=total_credits,
        grade_distribution=grade_distribution,
        credit_distribution=credit_distribution,
        passed=passed,
        failed=failed,
        pass_rate=pass_rate,
        performance_level=performance_level(gpa, total_courses),
        average_credits_per_course=average,
        scale=scale.name,
    )
