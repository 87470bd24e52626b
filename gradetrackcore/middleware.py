import logging
import time

from django.conf import settings
from django.http import JsonResponse

from .grading import DataIntegrityError

logger = logging.getLogger(__name__)


class RequestLogMiddleware:
    """Log method, path, status and duration of every request."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        started = time.monotonic()
        response = self.get_response(request)
        elapsed_ms = (time.monotonic() - started) * 1000
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method, request.path, response.status_code, elapsed_ms,
        )
        return response


class ApiErrorMiddleware:
    """Turn exceptions escaping /api/ views into JSON 500 responses."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if not request.path.startswith("/api/"):
            return None

        if isinstance(exception, DataIntegrityError):
            logger.error("Data integrity error on %s %s: %s",
                         request.method, request.path, exception)
            return JsonResponse(
                {"error": str(exception), "code": "DATA_INTEGRITY_ERROR"}, status=500,
            )

        logger.exception("Unhandled error on %s %s", request.method, request.path)
        body = {"error": "Internal Server Error", "code": "SERVER_ERROR"}
        if settings.DEBUG:
            body["detail"] = str(exception)
        return JsonResponse(body, status=500)
