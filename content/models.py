import math
import re
import time

from django.db import models
from django.utils import timezone

from store.models import SEOFields
from store.seo import score_blog, strip_html

WORDS_PER_MINUTE = 200


def content_slug(value):
    """Lowercase, drop anything outside ``[a-z0-9 -]``, spaces to hyphens."""
    slug = re.sub(r'[^a-z0-9\s-]', '', (value or '').lower())
    slug = re.sub(r'\s+', '-', slug)
    return re.sub(r'-+', '-', slug).strip('-')


def unique_content_slug(model, value, instance_pk=None):
    """``content_slug`` with a millisecond timestamp appended when already taken."""
    slug = content_slug(value) or 'post'
    if model.objects.filter(slug=slug).exclude(pk=instance_pk).exists():
        slug = f"{slug}-{int(time.time() * 1000)}"
    return slug


def reading_time(html):
    return math.ceil(len(strip_html(html).split()) / WORDS_PER_MINUTE)


# ==========================================
# Blog
# ==========================================
class BlogCategory(models.Model):
    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=120, unique=True)
    description = models.TextField(blank=True, null=True)
    color = models.CharField(max_length=20, default="#6366f1")
    sort_order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['sort_order', 'name']
        verbose_name_plural = 'blog categories'

    def __str__(self):
        return self.name


class Blog(SEOFields):
    class Status(models.TextChoices):
        DRAFT = 'DRAFT', 'Draft'
        PUBLISHED = 'PUBLISHED', 'Published'
        SCHEDULED = 'SCHEDULED', 'Scheduled'
        ARCHIVED = 'ARCHIVED', 'Archived'

    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    excerpt = models.TextField(blank=True, null=True)
    content = models.TextField()
    featured_image = models.URLField(max_length=500, blank=True, null=True)
    featured_image_alt = models.CharField(max_length=255, blank=True, default='')

    author_name = models.CharField(max_length=100, default='Admin')
    author_image = models.URLField(max_length=500, blank=True, null=True)
    author_bio = models.TextField(blank=True, null=True)

    category = models.ForeignKey(BlogCategory, on_delete=models.SET_NULL, null=True, blank=True, related_name='blogs')
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT, db_index=True)
    is_featured = models.BooleanField(default=False)
    allow_comments = models.BooleanField(default=True)
    schema_type = models.CharField(max_length=50, default='Article')
    internal_notes = models.TextField(blank=True, null=True)

    reading_time = models.PositiveIntegerField(default=0)
    view_count = models.PositiveIntegerField(default=0)
    published_at = models.DateTimeField(null=True, blank=True, db_index=True)
    scheduled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [models.Index(fields=['status', '-published_at'])]

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = unique_content_slug(Blog, self.title, self.pk)
        self.reading_time = reading_time(self.content)
        if self.status == self.Status.PUBLISHED and not self.published_at:
            self.published_at = timezone.now()
        self.seo_score = score_blog(self)
        super().save(*args, **kwargs)

    @property
    def tag_names(self):
        if not self.pk:
            return []
        return [tag.name for tag in self.tags.all()]

    def set_tags(self, names):
        """Replace the post's tags and re-score it."""
        self.tags.all().delete()
        seen = set()
        for name in names:
            name = (name or '').strip()
            if not name or name.lower() in seen:
                continue
            seen.add(name.lower())
            BlogTag.objects.create(blog=self, name=name, slug=content_slug(name))
        self.seo_score = score_blog(self)
        Blog.objects.filter(pk=self.pk).update(seo_score=self.seo_score)

    def __str__(self):
        return self.title


class BlogTag(models.Model):
    blog = models.ForeignKey(Blog, on_delete=models.CASCADE, related_name='tags')
    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=120, db_index=True)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return self.name


# ==========================================
# Hero banners
# ==========================================
class HeroBanner(models.Model):
    class Location(models.TextChoices):
        HOME = 'HOME', 'Home page'
        PREBUILT_PC = 'PREBUILT_PC', 'Prebuilt PC page'

    location = models.CharField(max_length=20, choices=Location.choices, db_index=True)
    title = models.CharField(max_length=255)
    subtitle = models.CharField(max_length=255, blank=True, null=True)
    description = models.TextField(blank=True, null=True)
    image_url = models.URLField(max_length=500, blank=True, null=True)
    mobile_image_url = models.URLField(max_length=500, blank=True, null=True)
    button_text = models.CharField(max_length=100, blank=True, null=True)
    button_link = models.CharField(max_length=500, blank=True, null=True)
    text_color = models.CharField(max_length=30, default="#ffffff")
    overlay_color = models.CharField(max_length=50, default="rgba(0,0,0,0.5)")
    text_align = models.CharField(max_length=10, default="left")
    badge_text = models.CharField(max_length=50, blank=True, null=True)
    badge_color = models.CharField(max_length=30, default="#ef4444")
    start_date = models.DateTimeField(null=True, blank=True)
    end_date = models.DateTimeField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['sort_order', '-created_at']

    def __str__(self):
        return f"{self.location}: {self.title}"


# ==========================================
# Inquiries
# ==========================================
class Inquiry(models.Model):
    class Type(models.TextChoices):
        MANUAL = 'MANUAL', 'Manual'
        MODAL_WEB = 'MODAL_WEB', 'Website popup'
        CHAT_WEB = 'CHAT_WEB', 'Website chat'
        AD_WEB = 'AD_WEB', 'Ad landing page'
        SOCIAL_MEDIA = 'SOCIAL_MEDIA', 'Social media'
        PHONE_CALL = 'PHONE_CALL', 'Phone call'
        WALK_IN = 'WALK_IN', 'Walk-in'

    class Status(models.TextChoices):
        NEW = 'NEW', 'New'
        CONTACTED = 'CONTACTED', 'Contacted'
        INTERESTED = 'INTERESTED', 'Interested'
        FOLLOW_UP = 'FOLLOW_UP', 'Follow up'
        CONVERTED = 'CONVERTED', 'Converted'
        NOT_INTERESTED = 'NOT_INTERESTED', 'Not interested'
        CANCELLED = 'CANCELLED', 'Cancelled'

    type = models.CharField(max_length=20, choices=Type.choices, default=Type.MANUAL, db_index=True)
    name = models.CharField(max_length=150)
    mobile = models.CharField(max_length=15)
    email = models.EmailField(blank=True, null=True)
    requirement = models.TextField(blank=True, null=True)
    budget = models.CharField(max_length=100, blank=True, null=True)
    note = models.TextField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.NEW, db_index=True)
    source = models.CharField(max_length=255, blank=True, null=True)
    utm_source = models.CharField(max_length=255, blank=True, null=True)
    utm_medium = models.CharField(max_length=255, blank=True, null=True)
    utm_campaign = models.CharField(max_length=255, blank=True, null=True)
    follow_up_date = models.DateTimeField(null=True, blank=True)
    last_contacted_at = models.DateTimeField(null=True, blank=True)
    assigned_to = models.CharField(max_length=150, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name_plural = 'inquiries'

    def __str__(self):
        return f"{self.name} ({self.mobile})"
