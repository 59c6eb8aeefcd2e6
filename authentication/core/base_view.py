import logging
import traceback
from django.http import Http404
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.exceptions import (
    APIException,
    AuthenticationFailed,
    MethodNotAllowed,
    NotAuthenticated,
    ValidationError,
)
from rest_framework_simplejwt.exceptions import TokenError

from .pagination import StandardPagination
from .response import standardized_response

logger = logging.getLogger(__name__)


class BaseAPIView(APIView):
    """Base class for all API views with common error handling and response formatting"""
    pagination_class = StandardPagination

    @property
    def paginator(self):
        if not hasattr(self, '_paginator'):
            self._paginator = self.pagination_class()
        return self._paginator

    def paginate_queryset(self, queryset):
        return self.paginator.paginate_queryset(queryset, self.request, view=self)

    def get_paginated_response(self, data, key='results', **extra):
        return self.paginator.get_paginated_response(data, key=key, **extra)

    def _extract_error_message(self, detail):
        """
        Keep structured error payloads (dict/list) for serializer errors and
        normalize simple details to strings.
        """
        if isinstance(detail, (dict, list)):
            return detail
        return str(detail)

    def handle_exception(self, exc):
        """Standardized exception handling for all API views"""
        request = getattr(self, "request", None)
        method = getattr(request, "method", "UNKNOWN")
        path = getattr(request, "path", "UNKNOWN")
        user = getattr(request, "user", None)
        user_id = getattr(user, "uuid", None) or getattr(user, "id", None) or "anonymous"

        if isinstance(exc, (AuthenticationFailed, NotAuthenticated)):
            return Response(
                standardized_response(success=False, error=str(exc.detail)),
                status=status.HTTP_401_UNAUTHORIZED
            )

        if isinstance(exc, TokenError):
            return Response(
                standardized_response(success=False, error='Invalid or expired token'),
                status=status.HTTP_401_UNAUTHORIZED
            )

        if isinstance(exc, MethodNotAllowed):
            return Response(
                standardized_response(success=False, error=str(exc.detail)),
                status=status.HTTP_405_METHOD_NOT_ALLOWED
            )

        if isinstance(exc, Http404):
            return Response(
                standardized_response(success=False, error=str(exc) or "Not found"),
                status=status.HTTP_404_NOT_FOUND
            )

        if isinstance(exc, ValidationError):
            logger.warning(
                "Validation error on %s %s (user=%s): %s",
                method,
                path,
                user_id,
                exc.detail,
            )
            return Response(
                standardized_response(
                    success=False,
                    error=self._extract_error_message(exc.detail)
                ),
                status=status.HTTP_400_BAD_REQUEST
            )

        if isinstance(exc, APIException):
            error_code = exc.get_codes()
            if not isinstance(error_code, str):
                error_code = None

            logger.warning(
                "API exception on %s %s (user=%s, status=%s, code=%s): %s",
                method,
                path,
                user_id,
                exc.status_code,
                error_code,
                exc.detail,
            )
            return Response(
                standardized_response(
                    success=False,
                    error=self._extract_error_message(exc.detail),
                    error_code=error_code,
                ),
                status=exc.status_code
            )

        logger.error("Unexpected error on %s %s (user=%s): %s", method, path, user_id, str(exc))
        logger.error(traceback.format_exc())

        return Response(
            standardized_response(success=False, error="An unexpected error occurred"),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
