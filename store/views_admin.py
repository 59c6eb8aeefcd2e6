"""
Admin catalogue management API views

Categories, products, prebuilt PCs, tags, PC types and review moderation.
All endpoints require ADMIN role authentication.
"""
import logging

from django.conf import settings
from django.db import transaction
from django.db.models import Q, Count, Sum
from django.db.models.functions import Coalesce
from django.shortcuts import get_object_or_404
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
from .filters import AdminProductFilter
from .models import Category, Product, PrebuiltPC, PCType, Tag, Review, PublishStatus
from .serializers import (
    CategorySerializer, ProductListSerializer, ProductDetailSerializer, ProductWriteSerializer,
    PrebuiltPCListSerializer, PrebuiltPCDetailSerializer, PrebuiltPCWriteSerializer,
    PCTypeSerializer, TagSerializer, AdminReviewSerializer, ProductVariationSerializer,
)

logger = logging.getLogger(__name__)


def _validation_failed(serializer):
    return Response(
        standardized_response(success=False, error=first_error_message(serializer.errors)),
        status=status.HTTP_400_BAD_REQUEST
    )


# =====================================================
# CATEGORIES
# =====================================================

class AdminCategoryListCreateView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def get(self, request):
        categories = Category.objects.select_related('parent').annotate(product_count=Count('products'))
        search = request.query_params.get('search')
        if search:
            categories = categories.filter(Q(name__icontains=search) | Q(slug__icontains=search))

        stats = {
            'total': Category.objects.count(),
            'parents': Category.objects.filter(parent__isnull=True).count(),
            'subcategories': Category.objects.filter(parent__isnull=False).count(),
            'total_products': Product.objects.count(),
        }
        return Response(standardized_response(data={
            'categories': CategorySerializer(categories, many=True).data,
            'stats': stats,
        }))

    @swagger_auto_schema(request_body=CategorySerializer)
    def post(self, request):
        if not request.data.get('name') or not request.data.get('slug'):
            return Response(
                standardized_response(success=False, error="Name and slug are required"),
                status=status.HTTP_400_BAD_REQUEST
            )
        serializer = CategorySerializer(data=request.data)
        if not serializer.is_valid():
            return _validation_failed(serializer)
        category = serializer.save()
        return Response(
            standardized_response(message="Category created successfully", data=CategorySerializer(category).data),
            status=status.HTTP_201_CREATED
        )


class AdminCategoryDetailView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def get(self, request, pk):
        category = get_object_or_404(Category, pk=pk)
        return Response(standardized_response(data=CategorySerializer(category).data))

    def _update(self, request, pk, partial):
        category = get_object_or_404(Category, pk=pk)
        serializer = CategorySerializer(category, data=request.data, partial=partial)
        if not serializer.is_valid():
            return _validation_failed(serializer)
        category = serializer.save()
        return Response(standardized_response(
            message="Category updated successfully", data=CategorySerializer(category).data
        ))

    @swagger_auto_schema(request_body=CategorySerializer)
    def put(self, request, pk):
        return self._update(request, pk, partial=False)

    @swagger_auto_schema(request_body=CategorySerializer, operation_description="Quick edit, e.g. visibility or featured flags")
    def patch(self, request, pk):
        return self._update(request, pk, partial=True)

    def delete(self, request, pk):
        category = get_object_or_404(Category, pk=pk)
        product_count = category.products.count()
        if product_count:
            return Response(
                standardized_response(
                    success=False,
                    error=f"Cannot delete category with {product_count} products. "
                          f"Please reassign or delete the products first.",
                ),
                status=status.HTTP_400_BAD_REQUEST
            )

        with transaction.atomic():
            category.children.update(parent=None)
            name = category.name
            category.delete()

        log_admin_action(request.user, AdminAuditLog.Action.CATEGORY_DELETED, 'category', pk, details={'name': name})
        return Response(standardized_response(message="Category deleted successfully"))


# =====================================================
# PRODUCTS
# =====================================================

class AdminProductListCreateView(BaseAPIView):
    """
    Query Parameters:
    - search: name, SKU or brand
    - status: DRAFT | PUBLISHED | ARCHIVED
    - category: category id
    - stock: in_stock | low_stock | out_of_stock
    - page, limit
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('search', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('status', openapi.IN_QUERY, type=openapi.TYPE_STRING, enum=PublishStatus.values),
            openapi.Parameter('category', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter('stock', openapi.IN_QUERY, type=openapi.TYPE_STRING,
                              enum=['in_stock', 'low_stock', 'out_of_stock']),
            openapi.Parameter('page', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter('limit', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
        ]
    )
    def get(self, request):
        queryset = Product.objects.select_related('primary_category').prefetch_related('images')
        queryset = AdminProductFilter(request.query_params, queryset=queryset).qs

        rows = self.paginate_queryset(queryset.order_by('-created_at'))
        return self.get_paginated_response(
            ProductListSerializer(rows, many=True).data, key='products', stats=self.stats()
        )

    @staticmethod
    def stats():
        products = Product.objects.all()
        return {
            'total': products.count(),
            'published': products.filter(status=PublishStatus.PUBLISHED).count(),
            'draft': products.filter(status=PublishStatus.DRAFT).count(),
            'out_of_stock': products.filter(stock_quantity=0).count(),
            'featured': products.filter(is_featured=True).count(),
            'low_stock': products.filter(
                stock_quantity__gt=0, stock_quantity__lte=settings.LOW_STOCK_THRESHOLD
            ).count(),
            'total_stock': products.aggregate(total=Coalesce(Sum('stock_quantity'), 0))['total'],
            'categories': Category.objects.filter(products__isnull=False).distinct().count(),
        }

    @swagger_auto_schema(request_body=ProductWriteSerializer)
    def post(self, request):
        missing = [f for f in ('name', 'slug', 'primary_category_id', 'price') if request.data.get(f) in (None, '')]
        if missing:
            return Response(
                standardized_response(success=False, error="Name, slug, primary category and price are required"),
                status=status.HTTP_400_BAD_REQUEST
            )
        serializer = ProductWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return _validation_failed(serializer)
        product = serializer.save()
        logger.info(f"Product {product.slug} created by {request.user.email}")
        return Response(
            standardized_response(message="Product created successfully", data=ProductDetailSerializer(product).data),
            status=status.HTTP_201_CREATED
        )


class AdminProductDetailView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def get(self, request, pk):
        product = get_object_or_404(
            Product.objects.select_related('primary_category').prefetch_related('images', 'specs', 'tags'), pk=pk
        )
        data = ProductDetailSerializer(product).data
        # Admins see inactive variations too.
        data["variations"] = ProductVariationSerializer(product.variations.all(), many=True).data
        return Response(standardized_response(data=data))

    def _update(self, request, pk, partial):
        product = get_object_or_404(Product, pk=pk)
        serializer = ProductWriteSerializer(product, data=request.data, partial=partial)
        if not serializer.is_valid():
            return _validation_failed(serializer)
        product = serializer.save()
        return Response(standardized_response(
            message="Product updated successfully", data=ProductDetailSerializer(product).data
        ))

    @swagger_auto_schema(request_body=ProductWriteSerializer)
    def put(self, request, pk):
        return self._update(request, pk, partial=True)

    @swagger_auto_schema(request_body=ProductWriteSerializer)
    def patch(self, request, pk):
        return self._update(request, pk, partial=True)

    def delete(self, request, pk):
        product = get_object_or_404(Product, pk=pk)
        sku = product.sku
        product.delete()
        log_admin_action(request.user, AdminAuditLog.Action.PRODUCT_DELETED, 'product', pk, details={'sku': sku})
        return Response(standardized_response(message="Product deleted successfully"))


# =====================================================
# PREBUILT PCS
# =====================================================

class AdminPrebuiltPCListCreateView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def get(self, request):
        params = request.query_params
        queryset = PrebuiltPC.objects.select_related('pc_type')

        search = params.get('search')
        if search:
            queryset = queryset.filter(Q(name__icontains=search) | Q(slug__icontains=search))
        status_param = (params.get('status') or '').upper()
        if status_param in PublishStatus.values:
            queryset = queryset.filter(status=status_param)
        if params.get('pc_type'):
            queryset = queryset.filter(pc_type_id=params['pc_type'])

        rows = self.paginate_queryset(queryset.order_by('-created_at'))

        everything = PrebuiltPC.objects.all()
        return self.get_paginated_response(
            PrebuiltPCListSerializer(rows, many=True).data,
            key='prebuilt_pcs',
            stats={
                'total': everything.count(),
                'published': everything.filter(status=PublishStatus.PUBLISHED).count(),
                'draft': everything.filter(status=PublishStatus.DRAFT).count(),
                'featured': everything.filter(is_featured=True).count(),
            },
        )

    @swagger_auto_schema(request_body=PrebuiltPCWriteSerializer)
    def post(self, request):
        if not request.data.get('name') or request.data.get('selling_price') in (None, ''):
            return Response(
                standardized_response(success=False, error="Name and selling price are required"),
                status=status.HTTP_400_BAD_REQUEST
            )
        serializer = PrebuiltPCWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return _validation_failed(serializer)
        pc = serializer.save()
        return Response(
            standardized_response(message="Prebuilt PC created successfully", data=PrebuiltPCDetailSerializer(pc).data),
            status=status.HTTP_201_CREATED
        )


class AdminPrebuiltPCDetailView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def get(self, request, pk):
        pc = get_object_or_404(PrebuiltPC.objects.prefetch_related('components__product', 'tags'), pk=pk)
        return Response(standardized_response(data=PrebuiltPCDetailSerializer(pc).data))

    @swagger_auto_schema(request_body=PrebuiltPCWriteSerializer)
    def put(self, request, pk):
        pc = get_object_or_404(PrebuiltPC, pk=pk)
        serializer = PrebuiltPCWriteSerializer(pc, data=request.data, partial=True)
        if not serializer.is_valid():
            return _validation_failed(serializer)
        pc = serializer.save()
        return Response(standardized_response(
            message="Prebuilt PC updated successfully", data=PrebuiltPCDetailSerializer(pc).data
        ))

    def delete(self, request, pk):
        pc = get_object_or_404(PrebuiltPC, pk=pk)
        pc.delete()
        return Response(standardized_response(message="Prebuilt PC deleted successfully"))


# =====================================================
# TAGS & PC TYPES
# =====================================================

class AdminTagListCreateView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def get(self, request):
        tags = Tag.objects.annotate(product_count=Count('products'))
        data = [
            {**TagSerializer(tag).data, 'product_count': tag.product_count}
            for tag in tags
        ]
        return Response(standardized_response(data=data))

    def post(self, request):
        name = (request.data.get('name') or '').strip()
        if not name:
            return Response(
                standardized_response(success=False, error="Tag name is required"),
                status=status.HTTP_400_BAD_REQUEST
            )
        tag, created = Tag.objects.get_or_create(name=name)
        return Response(
            standardized_response(data=TagSerializer(tag).data),
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )


class AdminTagDeleteView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def delete(self, request, pk):
        get_object_or_404(Tag, pk=pk).delete()
        return Response(standardized_response(message="Tag deleted successfully"))


class AdminPCTypeListCreateView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def get(self, request):
        return Response(standardized_response(data=PCTypeSerializer(PCType.objects.all(), many=True).data))

    @swagger_auto_schema(request_body=PCTypeSerializer)
    def post(self, request):
        serializer = PCTypeSerializer(data=request.data)
        if not serializer.is_valid():
            return _validation_failed(serializer)
        pc_type = serializer.save()
        return Response(
            standardized_response(message="PC type created successfully", data=PCTypeSerializer(pc_type).data),
            status=status.HTTP_201_CREATED
        )


class AdminPCTypeDeleteView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def delete(self, request, pk):
        get_object_or_404(PCType, pk=pk).delete()
        return Response(standardized_response(message="PC type deleted successfully"))


# =====================================================
# REVIEW MODERATION
# =====================================================

class AdminReviewListView(BaseAPIView):
    """
    Query Parameters:
    - status: approved | pending
    - rating: 1-5
    - page, limit
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    def get(self, request):
        reviews = Review.objects.select_related('user', 'product', 'prebuilt_pc')
        review_status = request.query_params.get('status')
        if review_status == 'approved':
            reviews = reviews.filter(is_approved=True)
        elif review_status == 'pending':
            reviews = reviews.filter(is_approved=False)
        if request.query_params.get('rating'):
            reviews = reviews.filter(rating=request.query_params['rating'])

        rows = self.paginate_queryset(reviews.order_by('-created_at'))
        return self.get_paginated_response(
            AdminReviewSerializer(rows, many=True).data,
            key='reviews',
            stats={
                'total': Review.objects.count(),
                'approved': Review.objects.filter(is_approved=True).count(),
                'pending': Review.objects.filter(is_approved=False).count(),
            },
        )


class AdminReviewModerateView(BaseAPIView):
    """POST action=approve|reject; DELETE removes the review"""
    permission_classes = [IsAuthenticated, IsAdmin]

    @swagger_auto_schema(
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            required=['action'],
            properties={'action': openapi.Schema(type=openapi.TYPE_STRING, enum=['approve', 'reject'])},
        )
    )
    def post(self, request, pk):
        review = get_object_or_404(Review, pk=pk)
        action = request.data.get('action')
        if action not in ('approve', 'reject'):
            return Response(
                standardized_response(success=False, error="Action must be approve or reject"),
                status=status.HTTP_400_BAD_REQUEST
            )
        review.is_approved = action == 'approve'
        review.save(update_fields=['is_approved', 'updated_at'])
        review.target.refresh_rating()
        return Response(standardized_response(
            message=f"Review {'approved' if review.is_approved else 'rejected'}",
            data=AdminReviewSerializer(review).data,
        ))

    def delete(self, request, pk):
        review = get_object_or_404(Review, pk=pk)
        target = review.target
        review.delete()
        target.refresh_rating()
        return Response(standardized_response(message="Review deleted successfully"))
