"""Tests for the grade scale and the GPA / CGPA / statistics folds."""
import itertools
from decimal import Decimal
from types import SimpleNamespace

import pytest
from django.core.exceptions import ImproperlyConfigured, ValidationError

from gradetrackcore import grading
from gradetrackcore.grading import (
    PLUS_MINUS_SCALE,
    STANDARD_SCALE,
    DataIntegrityError,
    Grade,
    cgpa,
    performance_level,
    round2,
    semester_gpa,
    summary,
    weighted_points,
)


def course(grade, credits):
    return SimpleNamespace(grade=grade, credits=credits)


class TestScale:

    def test_standard_points(self):
        assert dict(STANDARD_SCALE.points) == {
            "A": Decimal("4.0"), "B": Decimal("3.0"), "C": Decimal("2.0"),
            "D": Decimal("1.0"), "F": Decimal("0.0"),
        }

    def test_standard_scale_is_the_grade_enum(self):
        assert STANDARD_SCALE.grades == tuple(g.value for g in Grade)
        assert STANDARD_SCALE.failing == Grade.F

    @pytest.mark.parametrize("grade,credits", list(itertools.product("ABCDF", range(1, 5))))
    def test_weighted_points_is_exact_product(self, grade, credits):
        assert weighted_points(grade, credits) == STANDARD_SCALE.points[grade] * credits

    def test_weighted_points_accepts_enum(self):
        assert weighted_points(Grade.B, 3) == 9

    @pytest.mark.parametrize("bad", ["E", "a", "", None, "A+"])
    def test_out_of_scale_grade_raises(self, bad):
        with pytest.raises(DataIntegrityError):
            weighted_points(bad, 3)

    def test_active_scale_follows_settings(self, settings):
        settings.GRADE_SCALE = "plus_minus"
        assert grading.active_scale() is PLUS_MINUS_SCALE
        assert weighted_points("A-", 3) == Decimal("11.1")

    def test_unknown_scale_is_configuration_error(self, settings):
        settings.GRADE_SCALE = "percent"
        with pytest.raises(ImproperlyConfigured):
            grading.active_scale()

    def test_validate_grade(self, settings):
        grading.validate_grade("A")
        with pytest.raises(ValidationError, match="A, B, C, D, F"):
            grading.validate_grade("A-")
        settings.GRADE_SCALE = "plus_minus"
        grading.validate_grade("A-")


class TestRounding:

    @pytest.mark.parametrize("value,expected", [
        (Decimal("2.675"), 2.68),
        (2.675, 2.68),
        (Decimal("3.104"), 3.1),
        (Decimal("3.105"), 3.11),
        (Decimal("-1.005"), -1.01),
    ])
    def test_round2_half_away_from_zero(self, value, expected):
        assert round2(value) == expected


class TestSemesterGpa:

    def test_worked_example(self):
        courses = [course("A", 4), course("B", 3), course("C", 3)]
        # (16 + 9 + 6) / 10
        assert semester_gpa(courses) == 3.1

    def test_empty_is_zero(self):
        assert semester_gpa([]) == 0

    def test_order_does_not_matter(self):
        courses = [course("A", 4), course("B", 3), course("D", 1), course("F", 2), course("C", 3)]
        expected = semester_gpa(courses)
        for perm in itertools.permutations(courses):
            assert semester_gpa(perm) == expected

    def test_idempotent(self):
        courses = [course("A", 3), course("B", 4), course("B", 2)]
        assert semester_gpa(courses) == semester_gpa(courses)

    def test_repeating_decimal_rounds(self):
        # 11 / 3 = 3.666...
        assert semester_gpa([course("A", 2), course("B", 1)]) == 3.67

    def test_bad_grade_is_not_treated_as_zero(self):
        with pytest.raises(DataIntegrityError):
            semester_gpa([course("A", 3), course("Z", 3)])

    def test_plus_minus_scale(self):
        courses = [course("A-", 3), course("B+", 3)]
        # (11.1 + 9.9) / 6
        assert semester_gpa(courses, PLUS_MINUS_SCALE) == 3.5


class TestCgpa:

    def test_empty(self):
        assert cgpa([]) == 0
        assert cgpa([[], []]) == 0

    def test_pools_courses_instead_of_averaging_semesters(self):
        sem_a = [course("A", 4)]
        sem_b = [course("F", 1)]
        assert semester_gpa(sem_a) == 4.0
        assert semester_gpa(sem_b) == 0.0
        mean_of_gpas = (semester_gpa(sem_a) + semester_gpa(sem_b)) / 2
        assert mean_of_gpas == 2.0
        # (16 + 0) / (4 + 1)
        assert cgpa([sem_a, sem_b]) == 3.2
        assert cgpa([sem_a, sem_b]) != mean_of_gpas

    def test_matches_flat_pool(self):
        sems = [
            [course("A", 4), course("B", 3)],
            [],
            [course("C", 3), course("D", 2), course("B", 1)],
        ]
        flat = [c for sem in sems for c in sem]
        assert cgpa(sems) == semester_gpa(flat)

    def test_bad_grade_raises(self):
        with pytest.raises(DataIntegrityError):
            cgpa([[course("A", 3)], [course("X", 2)]])


class TestPerformanceLevel:

    @pytest.mark.parametrize("gpa,label", [
        (4.0, "Excellent"),
        (3.5, "Excellent"),
        (3.49, "Good"),
        (3.0, "Good"),
        (2.99, "Satisfactory"),
        (2.5, "Satisfactory"),
        (2.49, "Fair"),
        (2.0, "Fair"),
        (1.99, "Needs Improvement"),
        (0.0, "Needs Improvement"),
    ])
    def test_thresholds(self, gpa, label):
        assert performance_level(gpa) == label

    def test_no_courses(self):
        assert performance_level(0.0, course_count=0) == "N/A"


class TestSummary:

    def test_empty_report_has_every_field(self):
        report = summary([])
        assert report.gpa == 0
        assert report.total_courses == 0
        assert report.total_credits == 0
        assert report.grade_distribution == {"A": 0, "B": 0, "C": 0, "D": 0, "F": 0}
        assert report.credit_distribution == {"A": 0, "B": 0, "C": 0, "D": 0, "F": 0}
        assert report.pass_rate == 0
        assert report.performance_level == "N/A"
        assert report.average_credits_per_course == 0.0
        assert None not in report.as_dict().values()

    def test_pass_rate_rounds(self):
        report = summary([course("A", 3), course("A", 3), course("F", 3)])
        assert report.pass_rate == 67
        assert report.passed == 2
        assert report.failed == 1

    def test_pass_rate_rounds_half_up(self):
        # 7 of 8 passed -> 87.5
        courses = [course("B", 1)] * 7 + [course("F", 1)]
        assert summary(courses).pass_rate == 88

    def test_distributions_sum(self):
        courses = [course("A", 4), course("A", 2), course("C", 3), course("F", 1), course("D", 4)]
        report = summary(courses)
        assert sum(report.grade_distribution.values()) == len(courses)
        assert sum(report.credit_distribution.values()) == sum(c.credits for c in courses)
        assert report.grade_distribution == {"A": 2, "B": 0, "C": 1, "D": 1, "F": 1}
        assert report.credit_distribution == {"A": 6, "B": 0, "C": 3, "D": 4, "F": 1}

    def test_worked_example(self):
        report = summary([course("A", 4), course("B", 3), course("C", 3)])
        assert report.gpa == 3.1
        assert report.total_credits == 10
        assert report.total_courses == 3
        assert report.performance_level == "Good"
        assert report.average_credits_per_course == 3.33
        assert report.pass_rate == 100

    def test_gpa_matches_semester_formula(self):
        courses = [course("B", 2), course("D", 3), course("A", 1)]
        assert summary(courses).gpa == semester_gpa(courses)

    def test_as_dict(self):
        data = summary([course("A", 4)]).as_dict()
        assert data["gpa"] == 4.0
        assert data["performance_level"] == "Excellent"
        assert data["scale"] == "standard"
        assert data["grade_distribution"]["A"] == 1

    def test_plus_minus_distribution_keys(self):
        report = summary([course("B+", 3)], PLUS_MINUS_SCALE)
        assert set(report.grade_distribution) == set(PLUS_MINUS_SCALE.grades)
        assert report.grade_distribution["B+"] == 1
        assert report.scale == "plus_minus"

    def test_bad_grade_raises(self):
        with pytest.raises(DataIntegrityError):
            summary([course("A", 3), course("G", 3)])
