"""
Notification Serializers
"""

from rest_framework import serializers

from .notification_models import AdminNotification


class AdminNotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = AdminNotification
        fields = [
            'id', 'type', 'title', 'message', 'priority', 'entity_type', 'entity_id',
            'action_url', 'metadata', 'is_read', 'read_at', 'created_at',
        ]
        read_only_fields = fields


class NotificationIdsSerializer(serializers.Serializer):
    notification_id = serializers.IntegerField()
