import logging

from django.dispatch import Signal, receiver

from authentication.core.task_dispatch import dispatch_task
from users.notification_helpers import notify_new_order, notify_order_status_change
from users.notification_tasks import check_milestones_task

logger = logging.getLogger(__name__)

# Sent once an order exists for good (COD confirmed or gateway order created).
order_placed = Signal()
# Sent after an admin moves an order to a different status.
order_status_changed = Signal()


@receiver(order_placed)
def announce_new_order(sender, order, **kwargs):
    notify_new_order(order)
    dispatch_task(check_milestones_task)


@receiver(order_status_changed)
def announce_status_change(sender, order, old_status, **kwargs):
    from .services import OrderEmailService

    notify_order_status_change(order, old_status, order.status)
    OrderEmailService.queue_status_update(order, old_status)
    logger.info(f"Order {order.order_number} moved from {old_status} to {order.status}")
