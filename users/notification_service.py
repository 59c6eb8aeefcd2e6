"""
Notification Service Layer
Persists admin notifications, pushes them to connected admin consoles and
tracks store milestones.
"""

import logging
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from typing import Any, Dict, Optional

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from authentication.core.task_dispatch import dispatch_task
from .notification_models import AdminNotification, MilestoneTracker

logger = logging.getLogger(__name__)

ADMIN_GROUP = "admin_notifications"


class NotificationService:
    """Main service for managing admin notifications"""

    @staticmethod
    def create_notification(
        type: str,
        title: str,
        message: str,
        priority: str = AdminNotification.Priority.NORMAL,
        entity_type: Optional[str] = None,
        entity_id: Optional[Any] = None,
        action_url: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        send_websocket: bool = True,
    ) -> Optional[AdminNotification]:
        """
        Create a notification and push it to the admin group.

        Failures are logged and swallowed so the triggering request is never
        rolled back by a notification problem.
        """
        try:
            notification = AdminNotification.objects.create(
                type=type,
                title=str(title)[:255],
                message=message,
                priority=priority,
                entity_type=entity_type,
                entity_id=str(entity_id) if entity_id is not None else None,
                action_url=action_url,
                metadata=metadata or {},
            )
        except Exception as e:
            logger.error(f"Error creating notification '{title}': {str(e)}", exc_info=True)
            return None

        if send_websocket:
            transaction.on_commit(lambda: NotificationService.send_websocket_notification(notification))
        if priority == AdminNotification.Priority.URGENT:
            transaction.on_commit(lambda: NotificationService.send_email_notification(notification))

        logger.info(f"Admin notification created: {notification.id} ({notification.type})")
        return notification

    @staticmethod
    def send_websocket_notification(notification: AdminNotification) -> bool:
        """Push a notification to every connected admin"""
        channel_layer = get_channel_layer()
        if channel_layer is None:
            return False
        try:
            async_to_sync(channel_layer.group_send)(
                ADMIN_GROUP,
                {
                    'type': 'send_notification',
                    'notification': notification.to_dict(),
                    'unread_count': NotificationService.get_unread_count(),
                }
            )
            return True
        except Exception as e:
            logger.error(f"Error sending WebSocket notification {notification.id}: {str(e)}", exc_info=True)
            return False

    @staticmethod
    def send_email_notification(notification: AdminNotification) -> bool:
        """Queue the admin mailbox copy of an urgent notification"""
        # Import here to avoid circular imports
        from users.notification_tasks import send_admin_notification_email

        return dispatch_task(send_admin_notification_email, notification.id)

    @staticmethod
    def get_unread_count() -> int:
        return AdminNotification.objects.filter(is_read=False).count()

    @staticmethod
    def mark_as_read(notification_id) -> bool:
        notification = AdminNotification.objects.filter(pk=notification_id).first()
        if notification is None:
            return False
        notification.mark_as_read()
        return True

    @staticmethod
    def mark_as_unread(notification_id) -> bool:
        notification = AdminNotification.objects.filter(pk=notification_id).first()
        if notification is None:
            return False
        notification.mark_as_unread()
        return True

    @staticmethod
    def mark_all_as_read() -> int:
        return AdminNotification.objects.filter(is_read=False).update(is_read=True, read_at=timezone.now())

    @staticmethod
    def delete_notification(notification_id) -> bool:
        deleted, _ = AdminNotification.objects.filter(pk=notification_id).delete()
        return bool(deleted)

    @staticmethod
    def delete_all(read_only: bool = False) -> int:
        queryset = AdminNotification.objects.all()
        if read_only:
            queryset = queryset.filter(is_read=True)
        deleted, _ = queryset.delete()
        return deleted


# =====================================================
# MILESTONES
# =====================================================

REVENUE_MILESTONES = [10000, 50000, 100000, 500000, 1000000, 5000000, 10000000, 50000000, 100000000]
USER_MILESTONES = [10, 50, 100, 500, 1000, 5000, 10000, 50000]
ORDER_MILESTONES = [10, 50, 100, 500, 1000, 5000, 10000]
VISIT_MILESTONES = [100, 500, 1000, 5000, 10000, 50000, 100000]
DAILY_REVENUE_MILESTONES = [100000, 500000, 1000000]
DAILY_ORDER_MILESTONES = [10, 25, 50, 100]

MILESTONE_TYPES = {
    'revenue': AdminNotification.Type.MILESTONE_REVENUE,
    'users': AdminNotification.Type.MILESTONE_USERS,
    'orders': AdminNotification.Type.MILESTONE_ORDERS,
    'visits': AdminNotification.Type.MILESTONE_VISITS,
}


def format_indian_currency(value) -> str:
    """Compact rupee amount in Indian units, e.g. ₹1.50 L, ₹2.00 Cr"""
    value = Decimal(value)
    if value >= 10000000:
        return f"₹{value / 10000000:.2f} Cr"
    if value >= 100000:
        return f"₹{value / 100000:.2f} L"
    if value >= 1000:
        return f"₹{value / 1000:.1f}K"
    return f"₹{format_indian_number(value)}"


def format_indian_number(value) -> str:
    """Group digits the Indian way: 12,34,567"""
    whole = str(int(value))
    if len(whole) <= 3:
        return whole
    head, tail = whole[:-3], whole[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


class MilestoneService:
    """Announce each threshold once as the store grows"""

    @staticmethod
    def check_all():
        from django.contrib.auth import get_user_model
        from transactions.models import Order

        User = get_user_model()
        paid = Order.objects.filter(payment_status=Order.PaymentStatus.PAID)
        revenue = paid.aggregate(total=Sum('total'))['total'] or Decimal('0')
        MilestoneService.check('revenue', MilestoneTracker.Period.ALL_TIME, revenue, REVENUE_MILESTONES)

        customers = User.objects.filter(role=User.Role.CUSTOMER).count()
        MilestoneService.check('users', MilestoneTracker.Period.ALL_TIME, customers, USER_MILESTONES)

        orders = Order.objects.count()
        MilestoneService.check('orders', MilestoneTracker.Period.ALL_TIME, orders, ORDER_MILESTONES)

        today = timezone.localtime().replace(hour=0, minute=0, second=0, microsecond=0)
        daily_revenue = paid.filter(created_at__gte=today).aggregate(total=Sum('total'))['total'] or Decimal('0')
        if daily_revenue >= DAILY_REVENUE_MILESTONES[0]:
            MilestoneService.check('revenue', MilestoneTracker.Period.DAILY, daily_revenue, DAILY_REVENUE_MILESTONES)

        daily_orders = Order.objects.filter(created_at__gte=today).count()
        if daily_orders >= DAILY_ORDER_MILESTONES[0]:
            MilestoneService.check('orders', MilestoneTracker.Period.DAILY, daily_orders, DAILY_ORDER_MILESTONES)

    @staticmethod
    def check_visits():
        from analytics.models import PageView

        visits = PageView.objects.count()
        return MilestoneService.check('visits', MilestoneTracker.Period.ALL_TIME, visits, VISIT_MILESTONES)

    @staticmethod
    @transaction.atomic
    def check(metric, period, current_value, thresholds) -> Optional[int]:
        """
        Record ``current_value`` and notify when it crosses a threshold higher
        than the last one announced. Returns the new milestone, if any.
        """
        now = timezone.localtime()
        period_start = now.replace(hour=0, minute=0, second=0, microsecond=0) \
            if period == MilestoneTracker.Period.DAILY else datetime(1970, 1, 1, tzinfo=dt_timezone.utc)

        tracker, _ = MilestoneTracker.objects.select_for_update().get_or_create(
            type=metric, period=period,
            defaults={'current_value': current_value, 'period_start': period_start},
        )
        # A new day starts a fresh daily ladder.
        if period == MilestoneTracker.Period.DAILY and tracker.period_start < period_start:
            tracker.last_milestone = Decimal('0')
            tracker.period_start = period_start

        last = tracker.last_milestone
        reached = max((m for m in thresholds if current_value >= m and m > last), default=None)

        tracker.current_value = current_value
        if reached is None:
            tracker.save()
            return None

        tracker.last_milestone = reached
        tracker.save()

        label = "" if period == MilestoneTracker.Period.ALL_TIME else f" ({period})"
        title, message = MilestoneService._describe(metric, reached, label)
        NotificationService.create_notification(
            type=MILESTONE_TYPES[metric],
            title=title,
            message=message,
            priority=AdminNotification.Priority.HIGH,
            metadata={'milestone': reached, 'current_value': str(current_value), 'period': period},
        )
        logger.info(f"Milestone reached: {metric}/{period} {reached}")
        return reached

    @staticmethod
    def _describe(metric, milestone, label):
        if metric == 'revenue':
            return (
                f"Revenue Milestone{label}",
                f"Congratulations! You've reached {format_indian_currency(milestone)} in revenue{label}!",
            )
        if metric == 'users':
            return (
                f"Customer Milestone{label}",
                f"You now have {milestone:,} registered customers!",
            )
        if metric == 'orders':
            return (
                f"Order Milestone{label}",
                f"You've completed {milestone:,} orders{label}!",
            )
        return (
            f"Traffic Milestone{label}",
            f"Your store has received {milestone:,} visits{label}!",
        )
