"""
Site configuration API views

Admin settings (payment, shipping, SMTP, store details, seasonal theme),
image upload, static page SEO and the public seasonal theme endpoint.
"""
import logging

import cloudinary.uploader
from rest_framework import status
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from drf_spectacular.utils import extend_schema

from authentication.core.base_view import BaseAPIView
from authentication.core.exceptions import UploadRejectedException
from authentication.core.permissions import IsAdmin
from authentication.core.response import standardized_response, first_error_message
from authentication.models import AdminAuditLog
from authentication.views_admin import log_admin_action
from .models import PageSEO
from .serializers import SettingsUpdateSerializer, UploadSerializer, PageSEOSerializer
from .services import SettingsService

logger = logging.getLogger(__name__)

UPLOAD_ROOT_FOLDER = "sai-computers"


# =====================================================
# ADMIN SETTINGS
# =====================================================

class AdminSettingsView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    @swagger_auto_schema(operation_description="All setting groups with current values and a flat key/value map")
    def get(self, request):
        groups, stored = SettingsService.grouped()
        return Response(standardized_response(data={'groups': groups, 'settings': stored}))

    @swagger_auto_schema(
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            required=['settings'],
            properties={'settings': openapi.Schema(type=openapi.TYPE_OBJECT)},
        ),
        operation_description="Upsert settings; unknown keys are skipped"
    )
    def put(self, request):
        serializer = SettingsUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                standardized_response(success=False, error="Invalid settings data"),
                status=status.HTTP_400_BAD_REQUEST
            )

        written = SettingsService.update(serializer.validated_data['settings'])
        log_admin_action(
            request.user, AdminAuditLog.Action.SETTINGS_UPDATED, 'settings', '',
            details={'keys': written},
        )
        return Response(standardized_response(message="Settings updated successfully", data={'updated': written}))


class AdminUploadView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]
    parser_classes = [MultiPartParser, FormParser]

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('file', openapi.IN_FORM, type=openapi.TYPE_FILE, required=True),
            openapi.Parameter('folder', openapi.IN_FORM, type=openapi.TYPE_STRING, required=False),
        ],
        operation_description="Upload an image (JPG, PNG, SVG or WebP, max 2MB) to the media store"
    )
    def post(self, request):
        serializer = UploadSerializer(data=request.data)
        if not serializer.is_valid():
            raise UploadRejectedException(first_error_message(serializer.errors))

        upload = serializer.validated_data['file']
        folder = serializer.validated_data['folder']
        try:
            result = cloudinary.uploader.upload(
                upload,
                folder=f"{UPLOAD_ROOT_FOLDER}/{folder}",
                resource_type="auto",
            )
        except Exception as e:
            logger.error(f"Error uploading file to {folder}: {str(e)}", exc_info=True)
            return Response(
                standardized_response(success=False, error="Failed to upload file"),
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return Response(standardized_response(
            message="File uploaded successfully",
            data={'url': result['secure_url'], 'filename': result['public_id']},
        ))


# =====================================================
# STATIC PAGE SEO
# =====================================================

class AdminPageSEOView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def get(self, request):
        pages = PageSEO.objects.all()
        data = PageSEOSerializer(pages, many=True).data
        indexable = [p for p in pages if p.robots_index]
        average = round(sum(p.seo_score for p in indexable) / len(indexable)) if indexable else 0
        return Response(standardized_response(data={'pages': data, 'average_score': average}))

    @swagger_auto_schema(request_body=PageSEOSerializer, operation_description="Create or update the SEO of one page path")
    def put(self, request):
        path = (request.data.get('page_path') or '').strip()
        if not path:
            return Response(
                standardized_response(success=False, error="Page path is required"),
                status=status.HTTP_400_BAD_REQUEST
            )
        if not path.startswith('/'):
            path = f"/{path}"

        instance = PageSEO.objects.filter(page_path=path).first()
        serializer = PageSEOSerializer(instance, data=request.data, partial=instance is not None)
        if not serializer.is_valid():
            return Response(
                standardized_response(success=False, error=first_error_message(serializer.errors)),
                status=status.HTTP_400_BAD_REQUEST
            )
        page = serializer.save()
        return Response(
            standardized_response(message="Page SEO saved", data=PageSEOSerializer(page).data),
            status=status.HTTP_200_OK if instance else status.HTTP_201_CREATED
        )


# =====================================================
# PUBLIC
# =====================================================

class SeasonalSettingsView(BaseAPIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(description="Active seasonal decoration settings for the storefront")
    def get(self, request):
        return Response(standardized_response(data=SettingsService.get_seasonal()))
