import django.core.validators
import django.db.models.deletion
from django.db import migrations, models

import gradetrackcore.grading


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Student",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=50)),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("password_hash", models.CharField(max_length=128)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
        ),
        migrations.CreateModel(
            name="Semester",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("semester_number", models.PositiveSmallIntegerField()),
                ("year", models.PositiveSmallIntegerField()),
                ("semester_type", models.CharField(choices=[("Fall", "Fall"), ("Spring", "Spring"), ("Summer", "Summer")], max_length=10)),
                ("gpa", models.FloatField(default=0)),
                ("gpa_calculated_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("owner", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="semesters", to="gradetrackcore.student")),
            ],
            options={
                "ordering": ["-year", "-semester_number"],
            },
        ),
        migrations.CreateModel(
            name="Course",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                ("credits", models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(4)])),
                ("grade", models.CharField(max_length=2, validators=[gradetrackcore.grading.validate_grade])),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("owner", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="courses", to="gradetrackcore.student")),
                ("semester", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="courses", to="gradetrackcore.semester")),
            ],
            options={
                "ordering": ["created_at", "id"],
            },
        ),
    ]
