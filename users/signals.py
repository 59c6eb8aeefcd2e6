from django.db.models.signals import post_save
from django.dispatch import receiver

from authentication.models import CustomUser
from users.notification_helpers import notify_new_user


@receiver(post_save, sender=CustomUser)
def announce_new_customer(sender, instance, created, **kwargs):
    if created and instance.is_customer:
        notify_new_user(instance)
