from decimal import Decimal

from django.db import models
from django.utils import timezone


class AdminNotification(models.Model):
    """
    Back-office notification raised by storefront events (orders, signups,
    inquiries, reviews, stock, milestones). Shared by every admin.
    """

    class Type(models.TextChoices):
        NEW_ORDER = 'NEW_ORDER', 'New Order'
        NEW_USER = 'NEW_USER', 'New User'
        NEW_INQUIRY = 'NEW_INQUIRY', 'New Inquiry'
        NEW_REVIEW = 'NEW_REVIEW', 'New Review'
        LOW_STOCK = 'LOW_STOCK', 'Low Stock'
        ORDER_STATUS = 'ORDER_STATUS', 'Order Status'
        MILESTONE_REVENUE = 'MILESTONE_REVENUE', 'Revenue Milestone'
        MILESTONE_USERS = 'MILESTONE_USERS', 'Users Milestone'
        MILESTONE_ORDERS = 'MILESTONE_ORDERS', 'Orders Milestone'
        MILESTONE_VISITS = 'MILESTONE_VISITS', 'Visits Milestone'
        SYSTEM = 'SYSTEM', 'System'

    class Priority(models.TextChoices):
        LOW = 'LOW', 'Low'
        NORMAL = 'NORMAL', 'Normal'
        HIGH = 'HIGH', 'High'
        URGENT = 'URGENT', 'Urgent'

    type = models.CharField(max_length=30, choices=Type.choices, db_index=True)
    title = models.CharField(max_length=255)
    message = models.TextField()
    priority = models.CharField(max_length=10, choices=Priority.choices, default=Priority.NORMAL)

    # Related objects
    entity_type = models.CharField(max_length=50, blank=True, null=True)
    entity_id = models.CharField(max_length=100, blank=True, null=True)
    action_url = models.CharField(max_length=500, blank=True, null=True)
    metadata = models.JSONField(default=dict, blank=True)

    is_read = models.BooleanField(default=False, db_index=True)
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [models.Index(fields=['is_read', '-created_at'])]

    def __str__(self):
        return f"[{self.type}] {self.title}"

    def mark_as_read(self):
        if not self.is_read:
            self.is_read = True
            self.read_at = timezone.now()
            self.save(update_fields=['is_read', 'read_at'])

    def mark_as_unread(self):
        if self.is_read:
            self.is_read = False
            self.read_at = None
            self.save(update_fields=['is_read', 'read_at'])

    def to_dict(self):
        """Payload pushed over the websocket"""
        return {
            'id': self.id,
            'type': self.type,
            'title': self.title,
            'message': self.message,
            'priority': self.priority,
            'entity_type': self.entity_type,
            'entity_id': self.entity_id,
            'action_url': self.action_url,
            'metadata': self.metadata,
            'is_read': self.is_read,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class MilestoneTracker(models.Model):
    """Highest threshold already announced for a metric and period."""

    class Period(models.TextChoices):
        ALL_TIME = 'all_time', 'All time'
        DAILY = 'daily', 'Daily'

    type = models.CharField(max_length=20)
    period = models.CharField(max_length=20, choices=Period.choices, default=Period.ALL_TIME)
    current_value = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    last_milestone = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    period_start = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('type', 'period')

    def __str__(self):
        return f"{self.type}/{self.period}: {self.last_milestone}"
