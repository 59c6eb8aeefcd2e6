from django.core.validators import RegexValidator
from django.db import models

from authentication.models import CustomUser
from .notification_models import AdminNotification, MilestoneTracker  # noqa: F401

mobile_validator = RegexValidator(r'^[6-9]\d{9}$', 'Please enter a valid 10-digit mobile number')
pincode_validator = RegexValidator(r'^\d{6}$', 'Please enter a valid 6-digit pincode')


class Address(models.Model):
    """Saved shipping address. Each user has at most one default."""
    user = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='addresses')
    label = models.CharField(max_length=50, default='Home')
    full_name = models.CharField(max_length=100)
    mobile = models.CharField(max_length=10, validators=[mobile_validator])
    address_line1 = models.CharField(max_length=200)
    address_line2 = models.CharField(max_length=200, blank=True, null=True)
    landmark = models.CharField(max_length=100, blank=True, null=True)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    pincode = models.CharField(max_length=6, validators=[pincode_validator])
    country = models.CharField(max_length=100, default='India')
    is_default = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "Addresses"
        ordering = ['-is_default', '-created_at']

    def make_default(self):
        Address.objects.filter(user=self.user, is_default=True).exclude(pk=self.pk).update(is_default=False)
        if not self.is_default:
            self.is_default = True
            self.save(update_fields=['is_default', 'updated_at'])

    def __str__(self):
        return f"{self.label}: {self.full_name}, {self.city} {self.pincode}"
