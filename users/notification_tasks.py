"""
Celery tasks for notification operations
"""

from celery import shared_task
from django.core.mail import send_mail
from django.template.loader import render_to_string
from django.utils.html import strip_tags
from django.conf import settings
import logging

from .notification_models import AdminNotification
from .notification_service import MilestoneService

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_kwargs={'max_retries': 3, 'countdown': 60},
    retry_backoff=True,
)
def send_admin_notification_email(self, notification_id: int):
    """Mirror an urgent notification to the admin mailbox"""
    notification = AdminNotification.objects.filter(id=notification_id).first()
    if notification is None:
        logger.error(f"Notification {notification_id} not found")
        return {"status": "missing", "notification_id": notification_id}

    recipient = settings.ADMIN_NOTIFICATION_EMAIL
    if not recipient:
        logger.info("ADMIN_NOTIFICATION_EMAIL not configured, skipping notification email")
        return {"status": "skipped", "notification_id": notification_id}

    context = {
        'app_name': settings.APP_NAME,
        'title': notification.title,
        'message': notification.message,
        'priority': notification.priority,
        'action_url': f"{settings.FRONTEND_URL}{notification.action_url or ''}",
        'created_at': notification.created_at,
    }
    html_message = render_to_string('emails/admin_notification.html', context)
    send_mail(
        subject=f"[{notification.priority}] {notification.title}",
        message=strip_tags(html_message),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[recipient],
        html_message=html_message,
        fail_silently=False,
    )
    logger.info(f"Notification email sent for {notification_id} to {recipient}")
    return {"status": "success", "notification_id": notification_id}


@shared_task
def check_milestones_task():
    """Periodic milestone sweep over revenue, customers and orders"""
    try:
        MilestoneService.check_all()
    except Exception as e:
        logger.error(f"Milestone check failed: {str(e)}", exc_info=True)
        raise


@shared_task
def check_visit_milestones_task():
    return MilestoneService.check_visits()
