import json

import pytest
from django.test import Client

from gradetrackcore.auth import create_access_token
from gradetrackcore.models import Course, Semester, Student


@pytest.fixture(autouse=True)
def fast_bcrypt(settings):
    settings.BCRYPT_ROUNDS = 4


@pytest.fixture(autouse=True)
def standard_grade_scale(settings):
    settings.GRADE_SCALE = "standard"


@pytest.fixture
def student(db):
    s = Student(name="Ada Lovelace", email="ada@example.com")
    s.set_password("Secret123")
    s.save()
    return s


@pytest.fixture
def other_student(db):
    s = Student(name="Alan Turing", email="alan@example.com")
    s.set_password("Secret123")
    s.save()
    return s


@pytest.fixture
def semester(student):
    return Semester.objects.create(owner=student, semester_number=1, year=2024, semester_type="Fall")


@pytest.fixture
def add_course(student):
    def _add(semester, grade, credits, name="Course", owner=None):
        return Course.objects.create(
            owner=owner or student, semester=semester, name=name, grade=grade, credits=credits,
        )
    return _add


class ApiClient:
    """Thin JSON wrapper over the Django test client."""

    def __init__(self, token=None):
        self.client = Client()
        self.headers = {"HTTP_AUTHORIZATION": f"Bearer {token}"} if token else {}

    def _send(self, method, path, data=None):
        kwargs = dict(self.headers)
        if data is not None:
            kwargs["data"] = json.dumps(data)
            kwargs["content_type"] = "application/json"
        return getattr(self.client, method)(path, **kwargs)

    def get(self, path):
        return self._send("get", path)

    def post(self, path, data=None):
        return self._send("post", path, data if data is not None else {})

    def put(self, path, data=None):
        return self._send("put", path, data if data is not None else {})

    def patch(self, path, data=None):
        return self._send("patch", path, data)

    def delete(self, path):
        return self._send("delete", path)


@pytest.fixture
def api(student):
    return ApiClient(create_access_token(student.id))


@pytest.fixture
def other_api(other_student):
    return ApiClient(create_access_token(other_student.id))


@pytest.fixture
def anon(db):
    return ApiClient()


@pytest.fixture
def make_api():
    return ApiClient
