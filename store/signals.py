from django.db.models.signals import post_save, pre_save
from django.dispatch import receiver
import logging

from .models import Product, Review
from users.notification_helpers import notify_low_stock, notify_new_review

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=Product)
def remember_stock_level(sender, instance, **kwargs):
    """Keep the stored stock level so post_save can tell whether it moved."""
    if instance.pk:
        instance._previous_stock = (
            Product.objects.filter(pk=instance.pk).values_list('stock_quantity', flat=True).first()
        )
    else:
        instance._previous_stock = None


@receiver(post_save, sender=Product)
def low_stock_alert(sender, instance, created, **kwargs):
    """
    Raise a LOW_STOCK notification whenever a save leaves the product with
    between 1 and LOW_STOCK_THRESHOLD units and the level actually changed.
    """
    if kwargs.get('raw') or not instance.is_low_stock:
        return
    previous = getattr(instance, '_previous_stock', None)
    if not created and previous == instance.stock_quantity:
        return
    try:
        notify_low_stock(instance)
        logger.info(f"Low stock alert raised for '{instance.name}' ({instance.stock_quantity} left)")
    except Exception as e:
        logger.error(f"Failed to raise low stock alert for product {instance.pk}: {str(e)}", exc_info=True)


@receiver(post_save, sender=Review)
def new_review_notification(sender, instance, created, **kwargs):
    if not created or kwargs.get('raw'):
        return
    try:
        notify_new_review(instance)
    except Exception as e:
        logger.error(f"Failed to raise review notification for review {instance.pk}: {str(e)}", exc_info=True)
