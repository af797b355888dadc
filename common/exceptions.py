import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

log = logging.getLogger(__name__)


class Gone(APIException):
    status_code = status.HTTP_410_GONE
    default_detail = "Resource has expired."
    default_code = "gone"


def exception_handler(exc, context):
    # DRF 가 처리하는 예외(400/401/403/404/410...)는 그대로, 나머지는 로그 후 일반 500 응답
    response = drf_exception_handler(exc, context)
    if response is not None:
        return response

    request = context.get("request")
    view = context.get("view")
    log.exception(
        "Unhandled error in %s (%s %s)",
        view.__class__.__name__ if view is not None else "-",
        getattr(request, "method", "-"),
        getattr(request, "path", "-"),
    )
    return Response({"detail": "Internal server error."}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
