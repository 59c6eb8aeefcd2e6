from channels.generic.websocket import AsyncJsonWebsocketConsumer
from channels.db import database_sync_to_async
import logging
from datetime import datetime
from typing import Dict, Any

from .notification_models import AdminNotification
from .notification_service import ADMIN_GROUP, NotificationService

logger = logging.getLogger(__name__)


class AdminNotificationConsumer(AsyncJsonWebsocketConsumer):
    """
    Realtime feed of admin notifications.

    Only active admins may connect; they join the shared admin group and
    receive every notification as it is created.
    """

    async def connect(self):
        self.user = self.scope.get("user")
        self.joined = False

        if not self.user or not self.user.is_authenticated:
            logger.warning(f"Unauthenticated notification socket from {self.scope.get('client')}")
            await self.close(code=4001)
            return

        if not getattr(self.user, 'is_admin', False) or self.user.is_blocked:
            logger.warning(f"Non-admin {self.user.email} refused on notification socket")
            await self.close(code=4003)
            return

        await self.channel_layer.group_add(ADMIN_GROUP, self.channel_name)
        self.joined = True
        await self.accept()
        logger.info(f"Admin {self.user.email} connected to notifications")

        await self.send_json({
            'type': 'connection_established',
            'timestamp': datetime.now().isoformat(),
            'unread_count': await self._unread_count(),
        })

    async def disconnect(self, close_code: int):
        if getattr(self, 'joined', False):
            await self.channel_layer.group_discard(ADMIN_GROUP, self.channel_name)
            logger.info(f"Admin {self.user.email} disconnected (code: {close_code})")

    async def receive_json(self, content: Dict[str, Any], **kwargs):
        message_type = content.get('type')

        if message_type == 'ping':
            await self.send_json({'type': 'pong', 'timestamp': datetime.now().isoformat()})

        elif message_type == 'mark_as_read':
            marked = await self._mark_as_read(content.get('notification_id'))
            await self.send_json({
                'type': 'marked_as_read',
                'notification_id': content.get('notification_id'),
                'success': marked,
                'unread_count': await self._unread_count(),
            })

        elif message_type == 'fetch_recent':
            await self.send_json({
                'type': 'recent_notifications',
                'data': await self._recent(int(content.get('limit', 5))),
            })

        else:
            await self.send_json({'type': 'error', 'message': f'Unknown message type: {message_type}'})

    async def send_notification(self, event: Dict[str, Any]):
        """Called by group_send from NotificationService"""
        await self.send_json({
            'type': 'notification',
            'data': event.get('notification'),
            'unread_count': event.get('unread_count'),
            'timestamp': datetime.now().isoformat(),
        })

    # ============== Private Helper Methods ==============

    @database_sync_to_async
    def _unread_count(self):
        return NotificationService.get_unread_count()

    @database_sync_to_async
    def _mark_as_read(self, notification_id):
        if not notification_id:
            return False
        return NotificationService.mark_as_read(notification_id)

    @database_sync_to_async
    def _recent(self, limit):
        limit = min(max(limit, 1), 50)
        return [n.to_dict() for n in AdminNotification.objects.order_by('-created_at')[:limit]]
