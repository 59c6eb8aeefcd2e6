"""
Admin content management API views

Blog categories, blogs, hero banners, inquiries and marketing email.
All endpoints require ADMIN role authentication.
"""
import logging
from datetime import timedelta

from django.db.models import Count, Q, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from authentication.core.base_view import BaseAPIView
from authentication.core.permissions import IsAdmin
from authentication.core.response import standardized_response, first_error_message
from authentication.models import AdminAuditLog
from authentication.views_admin import log_admin_action
from .models import Blog, BlogCategory, HeroBanner, Inquiry
from .serializers import (
    AdminBlogSerializer, BlogWriteSerializer, BlogCategorySerializer, HeroBannerSerializer,
    InquirySerializer, MarketingEmailSerializer,
)
from .services import MarketingEmailService

logger = logging.getLogger(__name__)


def _validation_failed(serializer):
    return Response(
        standardized_response(success=False, error=first_error_message(serializer.errors)),
        status=status.HTTP_400_BAD_REQUEST
    )


def _not_found(message):
    return Response(standardized_response(success=False, error=message), status=status.HTTP_404_NOT_FOUND)


# =====================================================
# BLOG CATEGORIES
# =====================================================

class AdminBlogCategoryListCreateView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def get(self, request):
        categories = BlogCategory.objects.annotate(blog_count=Count('blogs'))
        return Response(standardized_response(data=BlogCategorySerializer(categories, many=True).data))

    @swagger_auto_schema(request_body=BlogCategorySerializer)
    def post(self, request):
        if not (request.data.get('name') or '').strip():
            return Response(
                standardized_response(success=False, error="Category name is required"),
                status=status.HTTP_400_BAD_REQUEST
            )
        serializer = BlogCategorySerializer(data=request.data)
        if not serializer.is_valid():
            return _validation_failed(serializer)
        category = serializer.save()
        return Response(
            standardized_response(message="Category created successfully", data=BlogCategorySerializer(category).data),
            status=status.HTTP_201_CREATED
        )


class AdminBlogCategoryDetailView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    @swagger_auto_schema(request_body=BlogCategorySerializer)
    def put(self, request, pk):
        category = BlogCategory.objects.filter(pk=pk).first()
        if category is None:
            return _not_found("Category not found")
        serializer = BlogCategorySerializer(category, data=request.data, partial=True)
        if not serializer.is_valid():
            return _validation_failed(serializer)
        category = serializer.save()
        return Response(standardized_response(
            message="Category updated successfully", data=BlogCategorySerializer(category).data
        ))

    @swagger_auto_schema(request_body=BlogCategorySerializer)
    def patch(self, request, pk):
        return self.put(request, pk)

    def delete(self, request, pk):
        category = BlogCategory.objects.filter(pk=pk).first()
        if category is None:
            return _not_found("Category not found")
        # posts keep their content and fall back to uncategorised
        category.delete()
        return Response(standardized_response(message="Category deleted successfully"))


# =====================================================
# BLOGS
# =====================================================

class AdminBlogListCreateView(BaseAPIView):
    """
    Query Parameters:
    - search: title, excerpt, content or author
    - status: DRAFT | PUBLISHED | SCHEDULED | ARCHIVED
    - category: blog category id
    - featured: true | false
    - page, limit
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('search', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('status', openapi.IN_QUERY, type=openapi.TYPE_STRING, enum=Blog.Status.values),
            openapi.Parameter('category', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter('featured', openapi.IN_QUERY, type=openapi.TYPE_STRING, enum=['true', 'false']),
            openapi.Parameter('page', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter('limit', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
        ]
    )
    def get(self, request):
        params = request.query_params
        blogs = Blog.objects.select_related('category').prefetch_related('tags')

        search = (params.get('search') or '').strip()
        if search:
            blogs = blogs.filter(
                Q(title__icontains=search)
                | Q(excerpt__icontains=search)
                | Q(content__icontains=search)
                | Q(author_name__icontains=search)
            )
        status_param = (params.get('status') or '').upper()
        if status_param in Blog.Status.values:
            blogs = blogs.filter(status=status_param)
        category = params.get('category')
        if category and category.isdigit():
            blogs = blogs.filter(category_id=int(category))
        featured = params.get('featured')
        if featured in ('true', 'false'):
            blogs = blogs.filter(is_featured=featured == 'true')

        rows = self.paginate_queryset(blogs.order_by('-created_at'))

        all_blogs = Blog.objects.all()
        stats = {
            'total': all_blogs.count(),
            'published': all_blogs.filter(status=Blog.Status.PUBLISHED).count(),
            'draft': all_blogs.filter(status=Blog.Status.DRAFT).count(),
            'scheduled': all_blogs.filter(status=Blog.Status.SCHEDULED).count(),
            'featured': all_blogs.filter(is_featured=True).count(),
            'total_views': all_blogs.aggregate(total=Coalesce(Sum('view_count'), 0))['total'],
        }
        categories = BlogCategory.objects.annotate(blog_count=Count('blogs'))
        return self.get_paginated_response(
            AdminBlogSerializer(rows, many=True).data,
            key='blogs',
            stats=stats,
            categories=BlogCategorySerializer(categories, many=True).data,
        )

    @swagger_auto_schema(request_body=BlogWriteSerializer)
    def post(self, request):
        if not request.data.get('title') or not request.data.get('content'):
            return Response(
                standardized_response(success=False, error="Title and content are required"),
                status=status.HTTP_400_BAD_REQUEST
            )
        serializer = BlogWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return _validation_failed(serializer)
        blog = serializer.save()
        logger.info(f"Blog '{blog.slug}' created by {request.user.email}")
        return Response(
            standardized_response(message="Blog created successfully", data=AdminBlogSerializer(blog).data),
            status=status.HTTP_201_CREATED
        )


class AdminBlogDetailView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    @staticmethod
    def get_blog(pk):
        return Blog.objects.select_related('category').prefetch_related('tags').filter(pk=pk).first()

    def get(self, request, pk):
        blog = self.get_blog(pk)
        if blog is None:
            return _not_found("Blog not found")
        return Response(standardized_response(data=AdminBlogSerializer(blog).data))

    @swagger_auto_schema(request_body=BlogWriteSerializer)
    def put(self, request, pk):
        blog = self.get_blog(pk)
        if blog is None:
            return _not_found("Blog not found")
        serializer = BlogWriteSerializer(blog, data=request.data, partial=True)
        if not serializer.is_valid():
            return _validation_failed(serializer)
        blog = serializer.save()
        return Response(standardized_response(
            message="Blog updated successfully", data=AdminBlogSerializer(self.get_blog(blog.pk)).data
        ))

    @swagger_auto_schema(request_body=BlogWriteSerializer)
    def patch(self, request, pk):
        return self.put(request, pk)

    def delete(self, request, pk):
        blog = Blog.objects.filter(pk=pk).first()
        if blog is None:
            return _not_found("Blog not found")
        blog.delete()
        return Response(standardized_response(message="Blog deleted successfully"))


# =====================================================
# HERO BANNERS
# =====================================================

class AdminHeroBannerListCreateView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('location', openapi.IN_QUERY, type=openapi.TYPE_STRING, enum=HeroBanner.Location.values),
        ]
    )
    def get(self, request):
        banners = HeroBanner.objects.all()
        location = (request.query_params.get('location') or '').upper()
        if location in HeroBanner.Location.values:
            banners = banners.filter(location=location)
        return Response(standardized_response(
            data=HeroBannerSerializer(banners.order_by('location', 'sort_order'), many=True).data
        ))

    @swagger_auto_schema(request_body=HeroBannerSerializer)
    def post(self, request):
        if not request.data.get('location') or not request.data.get('title'):
            return Response(
                standardized_response(success=False, error="Location and title are required"),
                status=status.HTTP_400_BAD_REQUEST
            )
        serializer = HeroBannerSerializer(data=request.data)
        if not serializer.is_valid():
            return _validation_failed(serializer)
        banner = serializer.save()
        return Response(
            standardized_response(message="Hero banner created successfully", data=HeroBannerSerializer(banner).data),
            status=status.HTTP_201_CREATED
        )


class AdminHeroBannerDetailView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def get(self, request, pk):
        banner = HeroBanner.objects.filter(pk=pk).first()
        if banner is None:
            return _not_found("Hero banner not found")
        return Response(standardized_response(data=HeroBannerSerializer(banner).data))

    @swagger_auto_schema(request_body=HeroBannerSerializer)
    def put(self, request, pk):
        banner = HeroBanner.objects.filter(pk=pk).first()
        if banner is None:
            return _not_found("Hero banner not found")
        serializer = HeroBannerSerializer(banner, data=request.data, partial=True)
        if not serializer.is_valid():
            return _validation_failed(serializer)
        banner = serializer.save()
        return Response(standardized_response(
            message="Hero banner updated successfully", data=HeroBannerSerializer(banner).data
        ))

    @swagger_auto_schema(request_body=HeroBannerSerializer)
    def patch(self, request, pk):
        return self.put(request, pk)

    def delete(self, request, pk):
        banner = HeroBanner.objects.filter(pk=pk).first()
        if banner is None:
            return _not_found("Hero banner not found")
        banner.delete()
        return Response(standardized_response(message="Hero banner deleted successfully"))


# =====================================================
# INQUIRIES
# =====================================================

class AdminInquiryListCreateView(BaseAPIView):
    """
    Query Parameters:
    - search: name, mobile, email or requirement
    - type, status
    - date_from, date_to: YYYY-MM-DD, inclusive
    - page, limit
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('search', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('type', openapi.IN_QUERY, type=openapi.TYPE_STRING, enum=Inquiry.Type.values),
            openapi.Parameter('status', openapi.IN_QUERY, type=openapi.TYPE_STRING, enum=Inquiry.Status.values),
            openapi.Parameter('date_from', openapi.IN_QUERY, type=openapi.TYPE_STRING, format=openapi.FORMAT_DATE),
            openapi.Parameter('date_to', openapi.IN_QUERY, type=openapi.TYPE_STRING, format=openapi.FORMAT_DATE),
            openapi.Parameter('page', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter('limit', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
        ]
    )
    def get(self, request):
        params = request.query_params
        inquiries = Inquiry.objects.all()

        search = (params.get('search') or '').strip()
        if search:
            inquiries = inquiries.filter(
                Q(name__icontains=search)
                | Q(mobile__icontains=search)
                | Q(email__icontains=search)
                | Q(requirement__icontains=search)
            )
        type_param = (params.get('type') or '').upper()
        if type_param in Inquiry.Type.values:
            inquiries = inquiries.filter(type=type_param)
        status_param = (params.get('status') or '').upper()
        if status_param in Inquiry.Status.values:
            inquiries = inquiries.filter(status=status_param)
        date_from = parse_date(params.get('date_from') or '')
        if date_from:
            inquiries = inquiries.filter(created_at__date__gte=date_from)
        date_to = parse_date(params.get('date_to') or '')
        if date_to:
            inquiries = inquiries.filter(created_at__date__lte=date_to)

        rows = self.paginate_queryset(inquiries.order_by('-created_at'))
        return self.get_paginated_response(
            InquirySerializer(rows, many=True).data, key='inquiries', stats=self.stats()
        )

    @staticmethod
    def stats():
        now = timezone.localtime()
        today = now.replace(hour=0, minute=0, second=0, microsecond=0)
        week_start = today - timedelta(days=today.weekday())
        month_start = today.replace(day=1)
        inquiries = Inquiry.objects.all()
        return {
            'total': inquiries.count(),
            'today': inquiries.filter(created_at__gte=today).count(),
            'this_week': inquiries.filter(created_at__gte=week_start).count(),
            'this_month': inquiries.filter(created_at__gte=month_start).count(),
            'by_type': {
                row['type']: row['count']
                for row in inquiries.values('type').annotate(count=Count('id')).order_by()
            },
            'by_status': {
                row['status']: row['count']
                for row in inquiries.values('status').annotate(count=Count('id')).order_by()
            },
        }

    @swagger_auto_schema(request_body=InquirySerializer)
    def post(self, request):
        if not request.data.get('name') or not request.data.get('mobile'):
            return Response(
                standardized_response(success=False, error="Name and mobile are required"),
                status=status.HTTP_400_BAD_REQUEST
            )
        serializer = InquirySerializer(data=request.data)
        if not serializer.is_valid():
            return _validation_failed(serializer)
        inquiry = serializer.save()
        return Response(
            standardized_response(message="Inquiry created successfully", data=InquirySerializer(inquiry).data),
            status=status.HTTP_201_CREATED
        )


class AdminInquiryDetailView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def get(self, request, pk):
        inquiry = Inquiry.objects.filter(pk=pk).first()
        if inquiry is None:
            return _not_found("Inquiry not found")
        return Response(standardized_response(data=InquirySerializer(inquiry).data))

    @swagger_auto_schema(request_body=InquirySerializer)
    def put(self, request, pk):
        inquiry = Inquiry.objects.filter(pk=pk).first()
        if inquiry is None:
            return _not_found("Inquiry not found")
        serializer = InquirySerializer(inquiry, data=request.data, partial=True)
        if not serializer.is_valid():
            return _validation_failed(serializer)
        inquiry = serializer.save()
        return Response(standardized_response(
            message="Inquiry updated successfully", data=InquirySerializer(inquiry).data
        ))

    @swagger_auto_schema(request_body=InquirySerializer)
    def patch(self, request, pk):
        return self.put(request, pk)

    def delete(self, request, pk):
        inquiry = Inquiry.objects.filter(pk=pk).first()
        if inquiry is None:
            return _not_found("Inquiry not found")
        inquiry.delete()
        return Response(standardized_response(message="Inquiry deleted successfully"))


# =====================================================
# MARKETING EMAIL
# =====================================================

class AdminMarketingEmailView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('type', openapi.IN_QUERY, type=openapi.TYPE_STRING,
                              enum=list(MarketingEmailSerializer.RECIPIENT_TYPES)),
            openapi.Parameter('search', openapi.IN_QUERY, type=openapi.TYPE_STRING),
        ]
    )
    def get(self, request):
        recipient_type = request.query_params.get('type') or 'inquiries'
        if recipient_type not in MarketingEmailSerializer.RECIPIENT_TYPES:
            return Response(
                standardized_response(success=False, error="Invalid recipient type"),
                status=status.HTTP_400_BAD_REQUEST
            )
        recipients = MarketingEmailService.recipients(
            recipient_type, search=(request.query_params.get('search') or '').strip()
        )
        return Response(standardized_response(data={'recipients': recipients, 'total': len(recipients)}))

    @swagger_auto_schema(request_body=MarketingEmailSerializer)
    def post(self, request):
        serializer = MarketingEmailSerializer(data=request.data)
        if not serializer.is_valid():
            return _validation_failed(serializer)
        data = serializer.validated_data

        recipients = MarketingEmailService.recipients(data['recipient_type'], selected_ids=data['selected_ids'])
        if not recipients:
            return Response(
                standardized_response(success=False, error="No recipients found"),
                status=status.HTTP_400_BAD_REQUEST
            )

        sent, failed, errors = MarketingEmailService.send(
            recipients, data['subject'], data['content'],
            button_text=data.get('button_text'), button_url=data.get('button_url'),
        )
        log_admin_action(
            request.user, AdminAuditLog.Action.MARKETING_EMAIL_SENT, 'marketing_email', '',
            details={
                'subject': data['subject'],
                'recipient_type': data['recipient_type'],
                'sent': sent,
                'failed': failed,
            }
        )
        return Response(standardized_response(
            message=f"Emails sent: {sent}, Failed: {failed}",
            data={'sent': sent, 'failed': failed, 'errors': errors[:10]},
        ))
