from django.urls import path
from .views import (
    CheckoutView, VerifyPaymentView, CouponValidateView, ShippingQuoteView,
    CustomerOrderListView, CustomerOrderDetailView,
)

urlpatterns = [
    # Checkout
    path('checkout/', CheckoutView.as_view(), name='checkout'),
    path('checkout/coupon/', CouponValidateView.as_view(), name='checkout-coupon'),
    path('checkout/verify-payment/', VerifyPaymentView.as_view(), name='checkout-verify-payment'),
    path('checkout/shipping/', ShippingQuoteView.as_view(), name='checkout-shipping'),

    # Customer orders
    path('orders/', CustomerOrderListView.as_view(), name='customer-orders'),
    path('orders/<str:order_number>/', CustomerOrderDetailView.as_view(), name='customer-order-detail'),
]
