import logging
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.db import transaction
from django.db.models import Q, Count, Avg, F
from django.shortcuts import get_object_or_404
from django.utils.cache import add_never_cache_headers
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiExample

from authentication.core.base_view import BaseAPIView
from authentication.core.pagination import StandardPagination
from authentication.core.response import standardized_response, first_error_message
from .cart_service import CartService
from .models import (
    Category, Product, PCType, PrebuiltPC, Favourite, Review, ReviewHelpful, PublishStatus, Visibility,
)
from .serializers import (
    CategorySerializer, ProductListSerializer, ProductDetailSerializer,
    PCTypeSerializer, PrebuiltPCListSerializer, PrebuiltPCDetailSerializer,
    FavouriteSerializer, ReviewSerializer, ReviewCreateSerializer,
)

logger = logging.getLogger(__name__)

PRODUCT_SORTS = {
    'price-low': ['price'],
    'price-high': ['-price'],
    'newest': ['-created_at'],
    'popularity': ['-rating_count', '-rating_avg'],
    'discount': [F('compare_at_price').desc(nulls_last=True)],
    'name': ['name'],
}

PREBUILT_SORTS = {
    'price-low': ['selling_price'],
    'price-high': ['-selling_price'],
    'newest': ['-created_at'],
    'popularity': ['-rating_count'],
}


def _decimal_param(request, name):
    value = request.query_params.get(name)
    if value in (None, ''):
        return None
    try:
        return Decimal(value)
    except InvalidOperation:
        return None


def _truthy(value):
    return str(value).lower() in ('1', 'true', 'yes')


def live_products():
    return Product.objects.filter(status=PublishStatus.PUBLISHED, visibility=Visibility.PUBLIC)


def live_prebuilt_pcs():
    return PrebuiltPC.objects.filter(status=PublishStatus.PUBLISHED, visibility=Visibility.PUBLIC)


class CataloguePagination(StandardPagination):
    page_size = 12


# ---------------------------
# Products
# ---------------------------
class ProductListView(BaseAPIView):
    permission_classes = [AllowAny]
    pagination_class = CataloguePagination

    @extend_schema(
        parameters=[
            OpenApiParameter(name='category', description='Category slug (includes subcategories)', required=False, type=str),
            OpenApiParameter(name='search', description='Search name, brand and short description', required=False, type=str),
            OpenApiParameter(name='brand', description='Filter by brand', required=False, type=str),
            OpenApiParameter(name='min_price', required=False, type=float),
            OpenApiParameter(name='max_price', required=False, type=float),
            OpenApiParameter(name='in_stock', required=False, type=bool),
            OpenApiParameter(name='featured', required=False, type=bool),
            OpenApiParameter(name='sort_by', description='price-low | price-high | newest | popularity | discount', required=False, type=str),
            OpenApiParameter(name='page', required=False, type=int),
            OpenApiParameter(name='limit', required=False, type=int),
        ],
        responses={200: ProductListSerializer(many=True)},
        description="Published, public products with filtering, sorting and pagination."
    )
    def get(self, request):
        params = request.query_params
        queryset = live_products().select_related('primary_category').prefetch_related('images')

        if _truthy(params.get('featured')):
            queryset = queryset.filter(is_featured=True)

        category_slug = params.get('category')
        if category_slug:
            category = Category.objects.filter(slug=category_slug).first()
            if category is None:
                queryset = queryset.none()
            else:
                queryset = queryset.filter(primary_category_id__in=category.descendant_ids())

        search = params.get('search')
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) | Q(brand__icontains=search) | Q(short_description__icontains=search)
            )

        brand = params.get('brand')
        if brand:
            queryset = queryset.filter(brand__iexact=brand)

        min_price = _decimal_param(request, 'min_price')
        if min_price is not None:
            queryset = queryset.filter(price__gte=min_price)
        max_price = _decimal_param(request, 'max_price')
        if max_price is not None:
            queryset = queryset.filter(price__lte=max_price)

        if _truthy(params.get('in_stock')):
            queryset = queryset.filter(is_in_stock=True, stock_quantity__gt=0)

        ordering = PRODUCT_SORTS.get(params.get('sort_by'), ['-is_featured', '-created_at'])
        rows = self.paginate_queryset(queryset.order_by(*ordering))

        brands = sorted(
            b for b in live_products().exclude(brand='').values_list('brand', flat=True).distinct() if b
        )
        return self.get_paginated_response(
            ProductListSerializer(rows, many=True).data, key='products', filters={'brands': brands}
        )


class ProductDetailView(BaseAPIView):
    permission_classes = [AllowAny]

    @extend_schema(
        responses={200: ProductDetailSerializer},
        description="Retrieve a published product by slug, with related products from its category"
    )
    def get(self, request, slug):
        product = live_products().select_related('primary_category').prefetch_related(
            'images', 'specs', 'tags'
        ).filter(slug=slug).first()
        if product is None:
            return Response(
                standardized_response(success=False, error="Product not found"),
                status=status.HTTP_404_NOT_FOUND
            )

        related = live_products().filter(
            primary_category_id=product.primary_category_id
        ).exclude(pk=product.pk).prefetch_related('images')[:8]

        return Response(standardized_response(data={
            'product': ProductDetailSerializer(product).data,
            'related_products': ProductListSerializer(related, many=True).data,
        }))


# ---------------------------
# Categories
# ---------------------------
class CategoryListView(BaseAPIView):
    permission_classes = [AllowAny]

    @extend_schema(description="Visible categories as a tree, each with its live product count")
    def get(self, request):
        categories = list(
            Category.objects.filter(is_visible=True).annotate(
                product_count=Count(
                    'products',
                    filter=Q(products__status=PublishStatus.PUBLISHED, products__visibility=Visibility.PUBLIC),
                )
            )
        )
        if _truthy(request.query_params.get('featured')):
            categories = [c for c in categories if c.is_featured]
            return Response(standardized_response(data=CategorySerializer(categories, many=True).data))

        by_parent = {}
        for category in categories:
            by_parent.setdefault(category.parent_id, []).append(category)

        visible_ids = {c.pk for c in categories}

        def build(category):
            node = CategorySerializer(category).data
            node['children'] = [build(child) for child in by_parent.get(category.pk, [])]
            return node

        roots = [c for c in categories if c.parent_id is None or c.parent_id not in visible_ids]
        return Response(standardized_response(data=[build(c) for c in roots]))


class CategoryDetailView(BaseAPIView):
    permission_classes = [AllowAny]

    def get(self, request, slug):
        category = get_object_or_404(Category, slug=slug, is_visible=True)
        children = category.children.filter(is_visible=True)
        return Response(standardized_response(data={
            'category': CategorySerializer(category).data,
            'children': CategorySerializer(children, many=True).data,
            'breadcrumbs': self._breadcrumbs(category),
        }))

    @staticmethod
    def _breadcrumbs(category):
        trail = []
        seen = set()
        node = category
        while node is not None and node.pk not in seen:
            seen.add(node.pk)
            trail.insert(0, {'name': node.name, 'slug': node.slug})
            node = node.parent
        return trail


# ---------------------------
# Prebuilt PCs
# ---------------------------
class PrebuiltPCListView(BaseAPIView):
    permission_classes = [AllowAny]
    pagination_class = CataloguePagination

    @extend_schema(
        parameters=[
            OpenApiParameter(name='pc_type', description='PC type slug', required=False, type=str),
            OpenApiParameter(name='featured', required=False, type=bool),
            OpenApiParameter(name='min_price', required=False, type=float),
            OpenApiParameter(name='max_price', required=False, type=float),
            OpenApiParameter(name='sort_by', required=False, type=str),
        ],
        responses={200: PrebuiltPCListSerializer(many=True)},
    )
    def get(self, request):
        params = request.query_params
        queryset = live_prebuilt_pcs().select_related('pc_type')

        if _truthy(params.get('featured')):
            queryset = queryset.filter(is_featured=True)
        if params.get('pc_type'):
            queryset = queryset.filter(pc_type__slug=params['pc_type'])
        min_price = _decimal_param(request, 'min_price')
        if min_price is not None:
            queryset = queryset.filter(selling_price__gte=min_price)
        max_price = _decimal_param(request, 'max_price')
        if max_price is not None:
            queryset = queryset.filter(selling_price__lte=max_price)

        ordering = PREBUILT_SORTS.get(params.get('sort_by'), ['-is_featured', '-created_at'])
        rows = self.paginate_queryset(queryset.order_by(*ordering))
        return self.get_paginated_response(
            PrebuiltPCListSerializer(rows, many=True).data,
            key='prebuilt_pcs',
            pc_types=PCTypeSerializer(PCType.objects.all(), many=True).data,
        )


class PrebuiltPCDetailView(BaseAPIView):
    permission_classes = [AllowAny]

    def get(self, request, slug):
        pc = live_prebuilt_pcs().select_related('pc_type').prefetch_related(
            'components__product', 'tags'
        ).filter(slug=slug).first()
        if pc is None:
            return Response(
                standardized_response(success=False, error="Prebuilt PC not found"),
                status=status.HTTP_404_NOT_FOUND
            )
        return Response(standardized_response(data=PrebuiltPCDetailSerializer(pc).data))


# ---------------------------
# Cart
# ---------------------------
class CartView(BaseAPIView):
    """
    Guest and signed-in cart.

    Guests are identified by the ``cart_session_id`` cookie, which is issued on
    first use and kept for 30 days. Responses are never cached.
    """
    permission_classes = [AllowAny]

    def _resolve(self, request, create=True):
        return CartService.get_cart(
            user=request.user,
            session_id=request.COOKIES.get(settings.CART_COOKIE_NAME),
            create=create,
        )

    def _respond(self, request, response_data, status_code, session_id=None):
        response = Response(standardized_response(**response_data), status=status_code)
        if session_id and not request.user.is_authenticated:
            response.set_cookie(
                settings.CART_COOKIE_NAME,
                session_id,
                max_age=settings.CART_COOKIE_MAX_AGE,
                httponly=True,
                secure=settings.AUTH_COOKIE_SECURE,
                samesite='Lax',
                path='/',
            )
        add_never_cache_headers(response)
        return response

    @extend_schema(description="Current cart with line totals, subtotal and item count")
    def get(self, request):
        cart, session_id = self._resolve(request, create=False)
        return self._respond(
            request,
            {"success": True, "data": {'cart': CartService.serialize(cart)}},
            status.HTTP_200_OK,
        )

    @extend_schema(
        examples=[OpenApiExample("Add product", value={"product_id": 12, "variation_id": None, "quantity": 1})],
        description="Add a product (optionally a variation) or a prebuilt PC; increments an existing line"
    )
    def post(self, request):
        try:
            quantity = int(request.data.get('quantity', 1))
        except (TypeError, ValueError):
            quantity = 0
        cart, session_id = self._resolve(request)
        success, response_data, status_code = CartService.add_item(
            cart,
            product_id=request.data.get('product_id'),
            prebuilt_pc_id=request.data.get('prebuilt_pc_id'),
            variation_id=request.data.get('variation_id'),
            quantity=quantity,
        )
        return self._respond(request, response_data, status_code, session_id)

    def put(self, request):
        try:
            quantity = int(request.data.get('quantity'))
        except (TypeError, ValueError):
            quantity = None
        cart, session_id = self._resolve(request, create=False)
        success, response_data, status_code = CartService.update_item(
            cart, request.data.get('item_id'), quantity
        )
        return self._respond(request, response_data, status_code, session_id)

    def delete(self, request):
        cart, session_id = self._resolve(request, create=False)
        success, response_data, status_code = CartService.remove_item(
            cart, request.query_params.get('item_id')
        )
        return self._respond(request, response_data, status_code, session_id)


# ---------------------------
# Favourites (wishlist)
# ---------------------------
class FavouriteListView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        favourites = Favourite.objects.filter(customer=request.user).select_related(
            'product', 'product__primary_category'
        ).prefetch_related('product__images')
        return Response(standardized_response(data=FavouriteSerializer(favourites, many=True).data))

    def post(self, request):
        product = get_object_or_404(Product, pk=request.data.get('product_id'))
        favourite, created = Favourite.objects.get_or_create(customer=request.user, product=product)
        return Response(
            standardized_response(
                message="Added to wishlist" if created else "Already in wishlist",
                data=FavouriteSerializer(favourite).data,
            ),
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )


class RemoveFavouriteView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, product_id):
        deleted, _ = Favourite.objects.filter(customer=request.user, product_id=product_id).delete()
        if not deleted:
            return Response(
                standardized_response(success=False, error="Product not in wishlist"),
                status=status.HTTP_404_NOT_FOUND
            )
        return Response(standardized_response(message="Removed from wishlist"))


# ---------------------------
# Reviews
# ---------------------------
class ReviewListCreateView(BaseAPIView):
    """
    GET  ?product_id= | ?prebuilt_pc_id=  approved reviews with rating analytics
    POST create a review (signed-in customers)
    """

    def get_permissions(self):
        if self.request.method == 'POST':
            return [IsAuthenticated()]
        return [AllowAny()]

    @extend_schema(
        parameters=[
            OpenApiParameter(name='product_id', required=False, type=int),
            OpenApiParameter(name='prebuilt_pc_id', required=False, type=int),
            OpenApiParameter(name='limit', required=False, type=int),
            OpenApiParameter(name='offset', required=False, type=int),
        ]
    )
    def get(self, request):
        product_id = request.query_params.get('product_id')
        prebuilt_pc_id = request.query_params.get('prebuilt_pc_id')
        if not product_id and not prebuilt_pc_id:
            return Response(
                standardized_response(success=False, error="Product ID or Prebuilt PC ID is required"),
                status=status.HTTP_400_BAD_REQUEST
            )

        reviews = Review.objects.filter(is_approved=True).select_related('user')
        if product_id:
            reviews = reviews.filter(product_id=product_id)
        else:
            reviews = reviews.filter(prebuilt_pc_id=prebuilt_pc_id)

        try:
            limit = min(max(int(request.query_params.get('limit', 10)), 1), 50)
            offset = max(int(request.query_params.get('offset', 0)), 0)
        except ValueError:
            limit, offset = 10, 0

        total = reviews.count()
        average = reviews.aggregate(avg=Avg('rating'))['avg'] or 0
        counts = dict(reviews.values_list('rating').annotate(c=Count('id')))
        distribution = [
            {
                'stars': stars,
                'count': counts.get(stars, 0),
                'percentage': round(counts.get(stars, 0) / total * 100) if total else 0,
            }
            for stars in range(5, 0, -1)
        ]

        page = list(reviews.order_by('-helpful_count', '-created_at')[offset:offset + limit])
        voted = []
        if request.user.is_authenticated:
            voted = list(ReviewHelpful.objects.filter(
                user=request.user, review__in=page
            ).values_list('review_id', flat=True))

        return Response(standardized_response(data={
            'reviews': ReviewSerializer(page, many=True).data,
            'analytics': {
                'total_reviews': total,
                'average_rating': round(average, 1),
                'distribution': distribution,
            },
            'pagination': {
                'total': total,
                'limit': limit,
                'offset': offset,
                'has_more': offset + limit < total,
            },
            'voted_review_ids': voted,
        }))

    def post(self, request):
        serializer = ReviewCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                standardized_response(success=False, error=first_error_message(serializer.errors)),
                status=status.HTTP_400_BAD_REQUEST
            )
        data = serializer.validated_data

        target = {}
        if data.get('product_id'):
            target['product'] = get_object_or_404(Product, pk=data['product_id'])
        else:
            target['prebuilt_pc'] = get_object_or_404(PrebuiltPC, pk=data['prebuilt_pc_id'])

        review = Review.objects.create(
            user=request.user,
            rating=data['rating'],
            title=data['title'].strip(),
            description=data['description'].strip(),
            images=data['images'],
            is_approved=True,
            is_verified=True,
            **target,
        )
        review.target.refresh_rating()

        return Response(
            standardized_response(message="Review submitted successfully", data=ReviewSerializer(review).data),
            status=status.HTTP_201_CREATED
        )


class ReviewHelpfulView(BaseAPIView):
    """Toggle the caller's helpful vote on a review"""
    permission_classes = [IsAuthenticated]

    def post(self, request, review_id):
        review = get_object_or_404(Review, pk=review_id, is_approved=True)
        with transaction.atomic():
            vote = ReviewHelpful.objects.filter(review=review, user=request.user).first()
            if vote:
                vote.delete()
                Review.objects.filter(pk=review.pk, helpful_count__gt=0).update(helpful_count=F('helpful_count') - 1)
                voted = False
            else:
                ReviewHelpful.objects.create(review=review, user=request.user)
                Review.objects.filter(pk=review.pk).update(helpful_count=F('helpful_count') + 1)
                voted = True
        review.refresh_from_db(fields=['helpful_count'])
        return Response(standardized_response(data={'voted': voted, 'helpful_count': review.helpful_count}))
