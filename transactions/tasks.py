"""
Celery tasks for customer order emails
"""
import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail
from django.template.loader import render_to_string
from django.utils.html import strip_tags

from configuration.services import SettingsService
from .models import Order

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    Order.Status.CONFIRMED: "Your order has been confirmed and will be processed shortly.",
    Order.Status.PROCESSING: "We are preparing your order for dispatch.",
    Order.Status.SHIPPED: "Your order is on its way.",
    Order.Status.DELIVERED: "Your order has been delivered. Thank you for shopping with us!",
    Order.Status.CANCELLED: "Your order has been cancelled.",
    Order.Status.REFUNDED: "Your payment has been refunded.",
}


def _order_context(order):
    return {
        'app_name': settings.APP_NAME,
        'order': order,
        'customer_name': order.customer_name,
        'items': list(order.items.all()),
        'order_url': f"{settings.FRONTEND_URL}/account/orders/{order.order_number}",
    }


def _send(order, subject, template, context):
    html_message = render_to_string(template, context)
    send_mail(
        subject=subject,
        message=strip_tags(html_message),
        from_email=SettingsService.from_email(),
        recipient_list=[order.customer_email],
        html_message=html_message,
        fail_silently=False,
    )


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_kwargs={'max_retries': 3, 'countdown': 60},
    retry_backoff=True,
)
def send_order_confirmation_email(self, order_id):
    order = Order.objects.filter(pk=order_id).prefetch_related('items').first()
    if order is None or not order.customer_email:
        logger.warning(f"Order {order_id} missing or has no email, confirmation skipped")
        return {"status": "skipped", "order_id": order_id}

    _send(
        order,
        f"Order Confirmed - {order.order_number}",
        'emails/order_confirmation.html',
        _order_context(order),
    )
    logger.info(f"Order confirmation sent for {order.order_number} to {order.customer_email}")
    return {"status": "success", "order_id": order_id}


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_kwargs={'max_retries': 3, 'countdown': 60},
    retry_backoff=True,
)
def send_order_status_email(self, order_id, old_status=None):
    order = Order.objects.filter(pk=order_id).prefetch_related('items').first()
    if order is None or not order.customer_email:
        logger.warning(f"Order {order_id} missing or has no email, status update skipped")
        return {"status": "skipped", "order_id": order_id}

    context = _order_context(order)
    context.update({
        'old_status': old_status,
        'status_title': order.status_title(),
        'status_message': STATUS_MESSAGES.get(order.status, ""),
    })
    _send(
        order,
        f"Order {order.order_number}: {order.status_title()}",
        'emails/order_status.html',
        context,
    )
    logger.info(f"Status email ({order.status}) sent for {order.order_number}")
    return {"status": "success", "order_id": order_id}
