from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from . import auth, grading


class Student(models.Model):
    name = models.CharField(max_length=50)
    email = models.EmailField(unique=True)   # always stored lower-cased
    password_hash = models.CharField(max_length=128)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name or self.email

    def save(self, *args, **kwargs):
        self.email = normalize_email(self.email)
        super().save(*args, **kwargs)

    def set_password(self, raw_password):
        self.password_hash = auth.hash_password(raw_password)

    def check_password(self, raw_password):
        return auth.verify_password(raw_password, self.password_hash)


def normalize_email(email):
    return (email or "").strip().lower()


class Semester(models.Model):
    class Type(models.TextChoices):
        FALL = "Fall"
        SPRING = "Spring"
        SUMMER = "Summer"

    owner = models.ForeignKey(Student, on_delete=models.CASCADE, related_name="semesters")
    semester_number = models.PositiveSmallIntegerField()
    year = models.PositiveSmallIntegerField()
    semester_type = models.CharField(max_length=10, choices=Type.choices)
    # Cached value, written only by an explicit recompute. See live_gpa.
    gpa = models.FloatField(default=0)
    gpa_calculated_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-year", "-semester_number"]

    def __str__(self):
        return f"{self.semester_type} {self.year} - Semester {self.semester_number}"

    @property
    def live_gpa(self):
        return grading.semester_gpa(self.courses.all())


class Course(models.Model):
    owner = models.ForeignKey(Student, on_delete=models.CASCADE, related_name="courses")
    semester = models.ForeignKey(Semester, on_delete=models.CASCADE, related_name="courses")
    name = models.CharField(max_length=100)
    credits = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(4)],
    )
    grade = models.CharField(max_length=2, validators=[grading.validate_grade])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.name} ({self.grade}, {self.credits} cr)"

    def clean(self):
        if self.semester_id and self.owner_id != self.semester.owner_id:
            raise ValidationError({"semester": "Semester belongs to another student."})

    @property
    def grade_value(self):
        return grading.active_scale().point_value(self.grade)

    @property
    def grade_points(self):
        return grading.weighted_points(self.grade, self.credits)
