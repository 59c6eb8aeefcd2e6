from django.urls import path
from .views_admin import (
    AdminCategoryListCreateView, AdminCategoryDetailView,
    AdminProductListCreateView, AdminProductDetailView,
    AdminPrebuiltPCListCreateView, AdminPrebuiltPCDetailView,
    AdminTagListCreateView, AdminTagDeleteView,
    AdminPCTypeListCreateView, AdminPCTypeDeleteView,
    AdminReviewListView, AdminReviewModerateView,
)

urlpatterns = [
    path('categories/', AdminCategoryListCreateView.as_view(), name='admin-categories'),
    path('categories/<int:pk>/', AdminCategoryDetailView.as_view(), name='admin-category-detail'),

    path('products/', AdminProductListCreateView.as_view(), name='admin-products'),
    path('products/<int:pk>/', AdminProductDetailView.as_view(), name='admin-product-detail'),

    path('prebuilt-pcs/', AdminPrebuiltPCListCreateView.as_view(), name='admin-prebuilt-pcs'),
    path('prebuilt-pcs/<int:pk>/', AdminPrebuiltPCDetailView.as_view(), name='admin-prebuilt-pc-detail'),

    path('tags/', AdminTagListCreateView.as_view(), name='admin-tags'),
    path('tags/<int:pk>/', AdminTagDeleteView.as_view(), name='admin-tag-delete'),
    path('pc-types/', AdminPCTypeListCreateView.as_view(), name='admin-pc-types'),
    path('pc-types/<int:pk>/', AdminPCTypeDeleteView.as_view(), name='admin-pc-type-delete'),

    path('reviews/', AdminReviewListView.as_view(), name='admin-reviews'),
    path('reviews/<int:pk>/', AdminReviewModerateView.as_view(), name='admin-review-moderate'),
]
