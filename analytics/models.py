from django.db import models

from authentication.models import CustomUser


class PageView(models.Model):
    """One storefront page view, updated with engagement as the visitor scrolls and leaves."""

    class DeviceType(models.TextChoices):
        DESKTOP = 'desktop', 'Desktop'
        MOBILE = 'mobile', 'Mobile'
        TABLET = 'tablet', 'Tablet'

    session_id = models.CharField(max_length=100, db_index=True)
    visitor_id = models.CharField(max_length=100, blank=True, null=True, db_index=True)
    user = models.ForeignKey(CustomUser, on_delete=models.SET_NULL, null=True, blank=True, related_name='page_views')

    page_path = models.CharField(max_length=500)
    page_title = models.CharField(max_length=500, blank=True, null=True)
    page_type = models.CharField(max_length=50, db_index=True, help_text="home, product, category, blog ...")
    reference_id = models.CharField(max_length=100, blank=True, null=True)
    reference_name = models.CharField(max_length=255, blank=True, null=True)

    referrer = models.CharField(max_length=1000, blank=True, null=True)
    referrer_domain = models.CharField(max_length=255, blank=True, null=True)
    utm_source = models.CharField(max_length=255, blank=True, null=True)
    utm_medium = models.CharField(max_length=255, blank=True, null=True)
    utm_campaign = models.CharField(max_length=255, blank=True, null=True)
    utm_term = models.CharField(max_length=255, blank=True, null=True)
    utm_content = models.CharField(max_length=255, blank=True, null=True)

    device_type = models.CharField(max_length=20, choices=DeviceType.choices, blank=True, null=True)
    browser = models.CharField(max_length=100, blank=True, null=True)
    os = models.CharField(max_length=100, blank=True, null=True)
    screen_width = models.PositiveIntegerField(null=True, blank=True)
    screen_height = models.PositiveIntegerField(null=True, blank=True)

    # engagement, seconds and percent
    dwell_time = models.PositiveIntegerField(default=0)
    scroll_depth = models.PositiveSmallIntegerField(default=0)
    interactions = models.PositiveIntegerField(default=0)
    is_bounce = models.BooleanField(default=True)
    is_exit = models.BooleanField(default=False)

    entered_at = models.DateTimeField(auto_now_add=True)
    exited_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['page_type', 'created_at']),
            models.Index(fields=['page_path']),
        ]

    def __str__(self):
        return f"{self.page_path} ({self.session_id})"

    @property
    def visitor_key(self):
        return self.visitor_id or self.session_id
