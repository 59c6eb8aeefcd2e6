"""
Public blog, hero banner and inquiry views
"""
import logging

from django.db.models import Count, Q
from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiExample

from authentication.core.base_view import BaseAPIView
from authentication.core.pagination import StandardPagination
from authentication.core.response import standardized_response, first_error_message
from authentication.core.throttles import InquiryThrottle
from users.notification_helpers import notify_new_inquiry
from .models import BlogCategory, HeroBanner
from .serializers import (
    BlogCategorySerializer, BlogListSerializer, BlogDetailSerializer, HeroBannerSerializer,
    InquiryCreateSerializer,
)
from .services import BlogService

logger = logging.getLogger(__name__)


def _truthy(value):
    return str(value).lower() in ('1', 'true', 'yes')


class BlogPagination(StandardPagination):
    page_size = 12
    max_page_size = 50


# ----------------------
# Blog
# ----------------------
class BlogListView(BaseAPIView):
    permission_classes = [AllowAny]
    pagination_class = BlogPagination

    @extend_schema(
        parameters=[
            OpenApiParameter(name='category', required=False, type=str, description="Category slug"),
            OpenApiParameter(name='tag', required=False, type=str, description="Tag slug"),
            OpenApiParameter(name='featured', required=False, type=bool),
            OpenApiParameter(name='search', required=False, type=str),
            OpenApiParameter(name='page', required=False, type=int),
            OpenApiParameter(name='limit', required=False, type=int),
        ],
    )
    def get(self, request):
        params = request.query_params
        blogs = BlogService.published()

        if params.get('category'):
            blogs = blogs.filter(category__slug=params['category'])
        if params.get('tag'):
            blogs = blogs.filter(tags__slug=params['tag'])
        if _truthy(params.get('featured')):
            blogs = blogs.filter(is_featured=True)
        search = (params.get('search') or '').strip()
        if search:
            blogs = blogs.filter(
                Q(title__icontains=search) | Q(excerpt__icontains=search) | Q(content__icontains=search)
            )

        rows = self.paginate_queryset(blogs.distinct().order_by('-is_featured', '-published_at'))
        categories = BlogCategory.objects.filter(is_active=True).annotate(
            blog_count=Count('blogs', filter=Q(
                blogs__status='PUBLISHED', blogs__published_at__lte=timezone.now()
            ))
        )
        return self.get_paginated_response(
            BlogListSerializer(rows, many=True).data,
            key='blogs',
            categories=BlogCategorySerializer(categories, many=True).data,
            popular_tags=BlogService.popular_tags(),
        )


class BlogDetailView(BaseAPIView):
    permission_classes = [AllowAny]

    @extend_schema(responses={200: BlogDetailSerializer})
    def get(self, request, slug):
        blog = BlogService.published().filter(slug=slug).first()
        if blog is None:
            return Response(
                standardized_response(success=False, error="Blog not found"),
                status=status.HTTP_404_NOT_FOUND
            )
        BlogService.record_view(blog)
        return Response(standardized_response(data={
            'blog': BlogDetailSerializer(blog).data,
            'related': BlogListSerializer(BlogService.related(blog), many=True).data,
        }))


# ----------------------
# Hero banners
# ----------------------
class HeroBannerListView(BaseAPIView):
    permission_classes = [AllowAny]

    @extend_schema(
        parameters=[
            OpenApiParameter(name='location', required=False, type=str, enum=HeroBanner.Location.values),
            OpenApiParameter(name='limit', required=False, type=int),
        ],
    )
    def get(self, request):
        location = (request.query_params.get('location') or HeroBanner.Location.HOME).upper()
        now = timezone.now()
        banners = HeroBanner.objects.filter(location=location, is_active=True).filter(
            Q(start_date__isnull=True) | Q(start_date__lte=now)
        ).filter(
            Q(end_date__isnull=True) | Q(end_date__gte=now)
        ).order_by('sort_order', '-created_at')

        limit = request.query_params.get('limit')
        if limit and limit.isdigit() and int(limit) > 0:
            banners = banners[:int(limit)]
        return Response(standardized_response(data=HeroBannerSerializer(banners, many=True).data))


# ----------------------
# Inquiries
# ----------------------
class InquiryCreateView(BaseAPIView):
    """Lead capture from the website popup, chat widget and landing pages."""
    permission_classes = [AllowAny]
    throttle_classes = [InquiryThrottle]

    @extend_schema(
        request=InquiryCreateSerializer,
        examples=[
            OpenApiExample(
                'Gaming PC enquiry',
                value={
                    'type': 'MODAL_WEB', 'name': 'Anil', 'mobile': '9876543210',
                    'requirement': 'Gaming PC under 80k', 'budget': '80000',
                },
                request_only=True,
            )
        ],
    )
    def post(self, request):
        if not request.data.get('name') or not request.data.get('mobile'):
            return Response(
                standardized_response(success=False, error="Name and mobile are required"),
                status=status.HTTP_400_BAD_REQUEST
            )
        serializer = InquiryCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                standardized_response(success=False, error=first_error_message(serializer.errors)),
                status=status.HTTP_400_BAD_REQUEST
            )
        inquiry = serializer.save()

        notify_new_inquiry(inquiry)
        logger.info(f"Inquiry {inquiry.id} received from {inquiry.mobile} via {inquiry.type}")

        return Response(
            standardized_response(message="Inquiry submitted successfully", data={'inquiry_id': inquiry.id}),
            status=status.HTTP_201_CREATED
        )
