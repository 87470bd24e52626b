# gradetrackcore/auth.py
"""Password hashing (bcrypt) and bearer-token handling (python-jose)."""
import logging
from datetime import datetime, timedelta, timezone
from functools import wraps

import bcrypt
from django.conf import settings
from django.http import JsonResponse
from jose import ExpiredSignatureError, JWTError, jwt

logger = logging.getLogger(__name__)


class AuthenticationFailed(Exception):
    def __init__(self, message, code):
        super().__init__(message)
        self.message = message
        self.code = code


def hash_password(password):
    # bcrypt only looks at the first 72 bytes
    password_bytes = password.encode("utf-8")[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def verify_password(password, password_hash):
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8")[:72], password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def create_access_token(student_id, expires_delta=None):
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(days=settings.JWT_EXPIRE_DAYS)
    )
    payload = {"sub": str(student_id), "exp": expire, "type": "access"}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token):
    """Return the token payload or raise AuthenticationFailed."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise AuthenticationFailed("Token expired. Please login again.", "TOKEN_EXPIRED")
    except JWTError:
        raise AuthenticationFailed("Invalid token. Please login again.", "INVALID_TOKEN")

    if payload.get("type") != "access" or not payload.get("sub"):
        raise AuthenticationFailed("Invalid token. Please login again.", "INVALID_TOKEN")
    return payload


def token_from_request(request):
    """Read the token from ``Authorization: Bearer`` or ``X-Auth-Token``."""
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip()
    return request.headers.get("X-Auth-Token", "").strip()


def token_required(view):
    """
    Verify the bearer token and attach ``request.student_id``.

    The student row itself is not loaded here; views fetch what they need
    scoped by ``request.student_id``.
    """
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        token = token_from_request(request)
        if not token:
            return JsonResponse(
                {"error": "No token provided. Please login first.", "code": "NO_TOKEN"},
                status=401,
            )
        try:
            payload = decode_access_token(token)
            request.student_id = int(payload["sub"])
        except AuthenticationFailed as e:
            return JsonResponse({"error": e.message, "code": e.code}, status=401)
        except ValueError:
            return JsonResponse(
                {"error": "Invalid token. Please login again.", "code": "INVALID_TOKEN"},
                status=401,
            )
        return view(request, *args, **kwargs)

    return wrapper
