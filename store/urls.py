from django.urls import path
from .views import (
    ProductListView, ProductDetailView,
    CategoryListView, CategoryDetailView,
    PrebuiltPCListView, PrebuiltPCDetailView,
    CartView,
    FavouriteListView, RemoveFavouriteView,
    ReviewListCreateView, ReviewHelpfulView,
)

urlpatterns = [
    # Products
    path('products/', ProductListView.as_view(), name='product-list'),
    path('products/<slug:slug>/', ProductDetailView.as_view(), name='product-detail'),

    # Categories
    path('categories/', CategoryListView.as_view(), name='category-list'),
    path('categories/<slug:slug>/', CategoryDetailView.as_view(), name='category-detail'),

    # Prebuilt PCs
    path('prebuilt-pcs/', PrebuiltPCListView.as_view(), name='prebuilt-pc-list'),
    path('prebuilt-pcs/<slug:slug>/', PrebuiltPCDetailView.as_view(), name='prebuilt-pc-detail'),

    # Cart
    path('cart/', CartView.as_view(), name='cart'),

    # Favourites
    path('favourites/', FavouriteListView.as_view(), name='favourites-list'),
    path('favourites/<int:product_id>/', RemoveFavouriteView.as_view(), name='remove-favourite'),

    # Reviews
    path('reviews/', ReviewListCreateView.as_view(), name='reviews'),
    path('reviews/<int:review_id>/helpful/', ReviewHelpfulView.as_view(), name='review-helpful'),
]
