"""
Notification Helpers - one function per storefront event that the admin
console should hear about.

Usage:
    from users.notification_helpers import notify_new_order, notify_low_stock

    notify_new_order(order)
    notify_low_stock(product)
"""

import logging

from .notification_models import AdminNotification
from .notification_service import NotificationService, format_indian_number

logger = logging.getLogger(__name__)

Type = AdminNotification.Type
Priority = AdminNotification.Priority


def notify_new_order(order):
    return NotificationService.create_notification(
        type=Type.NEW_ORDER,
        title="New Order Received",
        message=f"Order {order.order_number} from {order.customer_name} - ₹{format_indian_number(order.total)}",
        priority=Priority.HIGH,
        entity_type='order',
        entity_id=order.id,
        action_url=f"/admin/orders/{order.id}",
        metadata={'order_number': order.order_number, 'total': str(order.total)},
    )


def notify_new_user(user):
    name = user.full_name or user.email
    return NotificationService.create_notification(
        type=Type.NEW_USER,
        title="New Customer Registered",
        message=f"{name} ({user.email}) just signed up",
        entity_type='user',
        entity_id=user.uuid,
        action_url="/admin/customers",
        metadata={'name': name, 'email': user.email},
    )


def notify_new_inquiry(inquiry):
    details = (inquiry.requirement or '')[:50] or "No details"
    return NotificationService.create_notification(
        type=Type.NEW_INQUIRY,
        title="New Inquiry Received",
        message=f"{inquiry.name} ({inquiry.mobile}) - {details}...",
        priority=Priority.HIGH,
        entity_type='inquiry',
        entity_id=inquiry.id,
        action_url="/admin/inquiries",
        metadata={'name': inquiry.name, 'mobile': inquiry.mobile},
    )


def notify_new_review(review):
    reviewer = review.user.full_name or review.user.email.split('@')[0]
    target_name = str(review.target)
    return NotificationService.create_notification(
        type=Type.NEW_REVIEW,
        title="New Review Submitted",
        message=f'{reviewer} rated "{target_name}" {review.rating}/5 stars',
        entity_type='review',
        entity_id=review.id,
        action_url="/admin/reviews",
        metadata={'product_name': target_name, 'rating': review.rating},
    )


def notify_low_stock(product):
    return NotificationService.create_notification(
        type=Type.LOW_STOCK,
        title="Low Stock Alert",
        message=f'"{product.name}" has only {product.stock_quantity} units left',
        priority=Priority.URGENT,
        entity_type='product',
        entity_id=product.id,
        action_url=f"/admin/products/edit/{product.id}",
        metadata={'product_name': product.name, 'stock': product.stock_quantity},
    )


def notify_order_status_change(order, old_status, new_status):
    return NotificationService.create_notification(
        type=Type.ORDER_STATUS,
        title="Order Status Updated",
        message=f"Order {order.order_number} changed from {old_status} to {new_status}",
        entity_type='order',
        entity_id=order.id,
        action_url=f"/admin/orders/{order.id}",
        metadata={'old_status': old_status, 'new_status': new_status},
    )
