import logging

from django.conf import settings
from rest_framework import status
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.throttling import AnonRateThrottle

from authentication.core.base_view import BaseAPIView
from authentication.core.response import standardized_response, first_error_message
from .services import AuthenticationService
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from authentication.serializers import (
    UserBaseSerializer,
    UserRegistrationSerializer,
    UserLoginSerializer,
    AuthResponseSerializer,
    TokenRefreshSerializer,
)

logger = logging.getLogger(__name__)


def set_auth_cookie(response, access_token):
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=access_token,
        max_age=settings.AUTH_COOKIE_MAX_AGE,
        secure=settings.AUTH_COOKIE_SECURE,
        httponly=True,
        samesite='Lax',
        path='/',
        domain=settings.SESSION_COOKIE_DOMAIN
    )


def _signed_in_response(request, response_data, status_code):
    response = Response(standardized_response(**response_data), status=status_code)
    tokens = (response_data.get('data') or {}).get('tokens') or {}
    if tokens.get('access_token'):
        set_auth_cookie(response, tokens['access_token'])
        # Guest cart has been merged into the account cart.
        if request.COOKIES.get(settings.CART_COOKIE_NAME):
            response.delete_cookie(settings.CART_COOKIE_NAME, path='/')
    return response


class UserRegistrationView(BaseAPIView):
    permission_classes = [AllowAny]
    throttle_classes = [AnonRateThrottle]

    @swagger_auto_schema(
        request_body=UserRegistrationSerializer,
        responses={201: AuthResponseSerializer, 400: AuthResponseSerializer}
    )
    def post(self, request):
        serializer = UserRegistrationSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                standardized_response(success=False, error=first_error_message(serializer.errors)),
                status=status.HTTP_400_BAD_REQUEST
            )

        data = serializer.validated_data
        success, response_data, status_code = AuthenticationService.register(
            email=data['email'],
            password=data['password'],
            full_name=data['full_name'],
            phone_number=data.get('phone_number'),
            request_meta=request.META,
            cart_session_id=request.COOKIES.get(settings.CART_COOKIE_NAME),
        )
        return _signed_in_response(request, response_data, status_code)


class UserLoginView(BaseAPIView):
    permission_classes = [AllowAny]
    throttle_classes = [AnonRateThrottle]

    @swagger_auto_schema(
        request_body=UserLoginSerializer,
        responses={200: AuthResponseSerializer, 401: AuthResponseSerializer, 403: AuthResponseSerializer}
    )
    def post(self, request):
        success, response_data, status_code = AuthenticationService.login(
            email=request.data.get('email'),
            password=request.data.get('password'),
            request_meta=request.META,
            cart_session_id=request.COOKIES.get(settings.CART_COOKIE_NAME),
        )
        return _signed_in_response(request, response_data, status_code)


class TokenRefreshView(BaseAPIView):
    permission_classes = [AllowAny]
    throttle_classes = [AnonRateThrottle]

    @swagger_auto_schema(
        request_body=TokenRefreshSerializer,
        responses={200: AuthResponseSerializer, 401: AuthResponseSerializer}
    )
    def post(self, request):
        success, response_data, status_code = AuthenticationService.refresh_token(
            request.data.get('refresh_token')
        )
        return _signed_in_response(request, response_data, status_code)


class CurrentUserView(BaseAPIView):
    """Session probe used by the storefront header; never errors for guests."""
    permission_classes = [AllowAny]

    @swagger_auto_schema(responses={200: AuthResponseSerializer})
    def get(self, request):
        user = request.user
        if not user.is_authenticated or user.is_blocked:
            return Response(standardized_response(success=False, data={'user': None}), status=status.HTTP_200_OK)
        return Response(
            standardized_response(success=True, data={'user': UserBaseSerializer(user).data}),
            status=status.HTTP_200_OK
        )


class LogoutView(BaseAPIView):
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            properties={'refresh_token': openapi.Schema(type=openapi.TYPE_STRING)}
        ),
        responses={200: AuthResponseSerializer}
    )
    def post(self, request):
        access_jti = request.auth.get('jti') if request.auth is not None else None
        success, response_data, status_code = AuthenticationService.logout(
            request.user,
            access_jti=access_jti,
            refresh_token=request.data.get('refresh_token'),
        )
        response = Response(standardized_response(**response_data), status=status_code)
        response.delete_cookie(settings.AUTH_COOKIE_NAME, path='/', domain=settings.SESSION_COOKIE_DOMAIN)
        return response
