"""
Blog and marketing email services
"""
import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.mail import EmailMultiAlternatives, get_connection
from django.db.models import Count, F, Q
from django.template.loader import render_to_string
from django.utils import timezone
from django.utils.html import escape, strip_tags

from configuration.services import SettingsService
from .models import Blog, BlogTag, Inquiry

logger = logging.getLogger(__name__)

MARKETING_BATCH_SIZE = 10
MAX_RECIPIENTS = 100


class BlogService:

    @staticmethod
    def published():
        return Blog.objects.filter(
            status=Blog.Status.PUBLISHED, published_at__lte=timezone.now()
        ).select_related('category').prefetch_related('tags')

    @staticmethod
    def popular_tags(limit=10):
        """Tag names used by the most live posts"""
        return list(
            BlogTag.objects.filter(blog__status=Blog.Status.PUBLISHED, blog__published_at__lte=timezone.now())
            .values('name', 'slug')
            .annotate(count=Count('id'))
            .order_by('-count', 'name')[:limit]
        )

    @staticmethod
    def related(blog, limit=3):
        tag_slugs = [tag.slug for tag in blog.tags.all()]
        lookup = Q(tags__slug__in=tag_slugs)
        if blog.category_id:
            lookup |= Q(category_id=blog.category_id)
        return list(
            BlogService.published().exclude(pk=blog.pk).filter(lookup).distinct()
            .order_by('-published_at')[:limit]
        )

    @staticmethod
    def record_view(blog):
        Blog.objects.filter(pk=blog.pk).update(view_count=F('view_count') + 1)
        blog.view_count += 1

    @staticmethod
    def publish_scheduled(now=None):
        """Flip SCHEDULED posts whose time has come. Returns the number published."""
        now = now or timezone.now()
        count = 0
        for blog in Blog.objects.filter(status=Blog.Status.SCHEDULED, scheduled_at__lte=now):
            blog.status = Blog.Status.PUBLISHED
            blog.published_at = blog.scheduled_at or now
            blog.save()
            count += 1
        return count


class MarketingEmailService:
    """Pick recipients and send personalised campaign mail."""

    @staticmethod
    def recipients(recipient_type, search=None, selected_ids=None):
        """
        ``inquiries``: leads that left an email address
        ``customers``: accounts with at least one order
        ``all_users``: every customer account
        """
        if recipient_type == 'inquiries':
            queryset = Inquiry.objects.exclude(email__isnull=True).exclude(email='')
            if search:
                queryset = queryset.filter(
                    Q(name__icontains=search) | Q(email__icontains=search) | Q(mobile__icontains=search)
                )
            if selected_ids:
                queryset = queryset.filter(id__in=selected_ids)
            return [
                {'id': i.id, 'name': i.name, 'email': i.email, 'type': 'inquiry'}
                for i in queryset.order_by('-created_at')[:MAX_RECIPIENTS]
            ]

        User = get_user_model()
        queryset = User.objects.filter(role=User.Role.CUSTOMER, is_active=True)
        if recipient_type == 'customers':
            queryset = queryset.filter(orders__isnull=False).distinct()
        if search:
            queryset = queryset.filter(Q(full_name__icontains=search) | Q(email__icontains=search))
        if selected_ids:
            queryset = queryset.filter(id__in=selected_ids)
        return [
            {'id': u.id, 'name': u.full_name, 'email': u.email, 'type': 'customer'}
            for u in queryset.order_by('-created_at')[:MAX_RECIPIENTS]
        ]

    @staticmethod
    def personalise(text, recipient):
        return (
            text.replace('{{name}}', recipient.get('name') or 'Customer')
            .replace('{{email}}', recipient.get('email') or '')
        )

    @staticmethod
    def render(recipient, subject, content, button_text=None, button_url=None):
        body = MarketingEmailService.personalise(content, recipient)
        if button_text and button_url:
            body += (
                f'<p style="text-align:center;margin:24px 0;">'
                f'<a href="{escape(button_url)}" style="background:#2563eb;color:#ffffff;padding:12px 24px;'
                f'border-radius:6px;text-decoration:none;">{escape(button_text)}</a></p>'
            )
        return render_to_string('emails/marketing.html', {
            'app_name': settings.APP_NAME,
            'subject': MarketingEmailService.personalise(subject, recipient),
            'name': recipient.get('name') or 'Customer',
            'body': body,
        })

    @staticmethod
    def send(recipients, subject, content, button_text=None, button_url=None):
        """
        Send in batches of ``MARKETING_BATCH_SIZE`` over one connection per batch.

        Returns ``(sent, failed, errors)``; a failed address never stops the run.
        """
        sent, failed, errors = 0, 0, []
        from_email = SettingsService.from_email()

        for start in range(0, len(recipients), MARKETING_BATCH_SIZE):
            batch = recipients[start:start + MARKETING_BATCH_SIZE]
            connection = get_connection(fail_silently=False)
            for recipient in batch:
                try:
                    html = MarketingEmailService.render(recipient, subject, content, button_text, button_url)
                    message = EmailMultiAlternatives(
                        subject=MarketingEmailService.personalise(subject, recipient),
                        body=strip_tags(html),
                        from_email=from_email,
                        to=[recipient['email']],
                        connection=connection,
                    )
                    message.attach_alternative(html, "text/html")
                    message.send()
                    sent += 1
                except Exception as e:
                    failed += 1
                    errors.append(f"{recipient['email']}: {str(e)}")
                    logger.error(f"Marketing email to {recipient['email']} failed: {str(e)}")

        logger.info(f"Marketing email '{subject}' sent: {sent}, failed: {failed}")
        return sent, failed, errors
