from django.apps import AppConfig


class GradetrackcoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "gradetrackcore"
    verbose_name = "GradeTrack"
