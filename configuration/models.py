from django.db import models


class SiteSetting(models.Model):
    """Admin-editable key/value configuration. Values are stored as strings."""
    key = models.CharField(max_length=100, unique=True)
    value = models.TextField(blank=True)
    group = models.CharField(max_length=50, db_index=True)
    label = models.CharField(max_length=255, blank=True)
    type = models.CharField(max_length=20, default='text')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['key']

    def __str__(self):
        return f"{self.group}.{self.key}"


class PageSEO(models.Model):
    """SEO metadata for static storefront pages (home, about, contact ...)."""
    page_path = models.CharField(max_length=255, unique=True)
    page_name = models.CharField(max_length=255)
    seo_title = models.CharField(max_length=255, blank=True)
    seo_description = models.TextField(blank=True)
    seo_keywords = models.CharField(max_length=500, blank=True)
    canonical_url = models.URLField(max_length=500, blank=True)
    robots_index = models.BooleanField(default=True)
    robots_follow = models.BooleanField(default=True)
    og_title = models.CharField(max_length=255, blank=True)
    og_description = models.TextField(blank=True)
    og_image = models.URLField(max_length=500, blank=True)
    twitter_title = models.CharField(max_length=255, blank=True)
    twitter_description = models.TextField(blank=True)
    json_ld = models.JSONField(null=True, blank=True)
    seo_score = models.PositiveSmallIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['page_path']
        verbose_name = "Page SEO"
        verbose_name_plural = "Page SEO"

    def save(self, *args, **kwargs):
        from store.seo import analyze_page

        self.seo_score, _ = analyze_page(self)
        super().save(*args, **kwargs)

    @property
    def issues(self):
        from store.seo import analyze_page

        return analyze_page(self)[1]

    def __str__(self):
        return self.page_path
