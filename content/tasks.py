"""
Celery tasks for blog publishing
"""
import logging

from celery import shared_task

from .services import BlogService

logger = logging.getLogger(__name__)


@shared_task
def publish_scheduled_blogs():
    """Periodic sweep that publishes SCHEDULED posts once their time has passed"""
    count = BlogService.publish_scheduled()
    if count:
        logger.info(f"Published {count} scheduled blog post(s)")
    return {"status": "success", "published": count}
