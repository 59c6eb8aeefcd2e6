from django.urls import path
from .views_admin import (
    AdminOrderListView, AdminOrderDetailView,
    AdminCouponListCreateView, AdminCouponDetailView,
)

urlpatterns = [
    path('orders/', AdminOrderListView.as_view(), name='admin-orders'),
    path('orders/<str:ref>/', AdminOrderDetailView.as_view(), name='admin-order-detail'),

    path('coupons/', AdminCouponListCreateView.as_view(), name='admin-coupons'),
    path('coupons/<int:pk>/', AdminCouponDetailView.as_view(), name='admin-coupon-detail'),
]
