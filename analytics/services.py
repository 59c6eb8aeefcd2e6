"""
Reporting for the admin console: traffic analytics, the dashboard summary
and the SEO health report.
"""
import logging
from collections import Counter, defaultdict
from datetime import datetime, time, timedelta
from decimal import Decimal
from urllib.parse import urlparse

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db.models import Avg, Count, DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from configuration.models import PageSEO
from content.models import Blog, Inquiry
from store.models import Category, PrebuiltPC, Product, PublishStatus, Review
from store.seo import analyze_page, seo_issues
from transactions.models import Order, OrderItem
from users.notification_models import AdminNotification
from .models import PageView

logger = logging.getLogger(__name__)

DATE_FILTERS = (
    'today', 'yesterday', 'this_week', 'last_week', 'this_month', 'last_month',
    'this_year', 'last_year', 'lifetime',
)
HOURLY_FILTERS = ('today', 'yesterday')
LIFETIME_START = (2020, 1, 1)


def referrer_domain(referrer):
    if not referrer:
        return None
    return urlparse(referrer).hostname or None


def format_duration(seconds):
    if seconds < 60:
        return f"{seconds}s"
    minutes, secs = divmod(seconds, 60)
    if minutes < 60:
        return f"{minutes}m {secs}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m"


def percent(part, whole):
    return round(part / whole * 100) if whole else 0


def change(current, previous):
    """Percentage change, 100 when growing from nothing."""
    if previous:
        return round((current - previous) / previous * 100)
    return 100 if current else 0


def _midnight(day):
    return timezone.make_aware(datetime.combine(day, time.min), timezone.get_current_timezone())


def date_range(filter_name, today=None):
    """``(start, end)`` for a named period; weeks start on Sunday, ``end`` is exclusive."""
    today = today or timezone.localdate()
    tomorrow = today + timedelta(days=1)
    week_start = today - timedelta(days=(today.weekday() + 1) % 7)
    month_start = today.replace(day=1)

    if filter_name == 'today':
        start, end = today, tomorrow
    elif filter_name == 'yesterday':
        start, end = today - timedelta(days=1), today
    elif filter_name == 'this_week':
        start, end = week_start, tomorrow
    elif filter_name == 'last_week':
        start, end = week_start - timedelta(days=7), week_start
    elif filter_name == 'this_month':
        start, end = month_start, tomorrow
    elif filter_name == 'last_month':
        start, end = (month_start - timedelta(days=1)).replace(day=1), month_start
    elif filter_name == 'this_year':
        start, end = today.replace(month=1, day=1), tomorrow
    elif filter_name == 'last_year':
        start, end = today.replace(year=today.year - 1, month=1, day=1), today.replace(month=1, day=1)
    else:
        start, end = today.replace(*LIFETIME_START), tomorrow
    return _midnight(start), _midnight(end)


def _paid_revenue(queryset):
    return queryset.filter(payment_status=Order.PaymentStatus.PAID).aggregate(
        total=Coalesce(Sum('total'), Value(0), output_field=DecimalField(max_digits=12, decimal_places=2))
    )['total']


# =====================================================
# TRAFFIC
# =====================================================

class AnalyticsService:

    @staticmethod
    def report(filter_name='today'):
        if filter_name not in DATE_FILTERS:
            filter_name = 'lifetime'
        start, end = date_range(filter_name)
        views = list(PageView.objects.filter(created_at__gte=start, created_at__lt=end))
        total = len(views)

        visitors = {v.visitor_key for v in views}
        with_dwell = [v.dwell_time for v in views if v.dwell_time > 0]
        with_scroll = [v.scroll_depth for v in views if v.scroll_depth > 0]
        avg_dwell = round(sum(with_dwell) / len(with_dwell)) if with_dwell else 0

        previous_start = start - (end - start)
        previous = PageView.objects.filter(created_at__gte=previous_start, created_at__lt=start)
        previous_visitors = {v.visitor_key for v in previous.only('session_id', 'visitor_id')}

        overview = {
            'total_page_views': total,
            'unique_visitors': len(visitors),
            'unique_sessions': len({v.session_id for v in views}),
            'avg_dwell_time': avg_dwell,
            'avg_dwell_time_formatted': format_duration(avg_dwell),
            'bounce_rate': percent(sum(1 for v in views if v.is_bounce), total),
            'avg_scroll_depth': round(sum(with_scroll) / len(with_scroll)) if with_scroll else 0,
            'page_views_change': change(total, previous.count()),
            'visitors_change': change(len(visitors), len(previous_visitors)),
        }

        devices = Counter(v.device_type for v in views)
        report = {
            'filter': filter_name,
            'date_range': {'start': start.isoformat(), 'end': end.isoformat()},
            'overview': overview,
            'device_breakdown': {
                device: devices.get(device, 0) for device in PageView.DeviceType.values
            },
            'page_type_breakdown': dict(Counter(v.page_type for v in views)),
            'top_pages': AnalyticsService.top_pages(views),
            'top_products': AnalyticsService.top_products(views),
            'traffic_sources': AnalyticsService.traffic_sources(views),
            'hourly_breakdown': None,
            'daily_breakdown': None,
        }
        if filter_name in HOURLY_FILTERS:
            hours = Counter(timezone.localtime(v.created_at).hour for v in views)
            report['hourly_breakdown'] = {hour: hours.get(hour, 0) for hour in range(24)}
        else:
            days = Counter(timezone.localtime(v.created_at).date().isoformat() for v in views)
            report['daily_breakdown'] = [{'date': day, 'views': days[day]} for day in sorted(days)]
        return report

    @staticmethod
    def top_pages(views, limit=10):
        pages = defaultdict(lambda: {'views': 0, 'dwell': 0, 'bounces': 0})
        for view in views:
            page = pages[view.page_path]
            page.setdefault('title', view.page_title or view.page_path)
            page.setdefault('type', view.page_type)
            page['views'] += 1
            page['dwell'] += view.dwell_time
            page['bounces'] += int(view.is_bounce)

        rows = [
            {
                'path': path,
                'title': page['title'],
                'type': page['type'],
                'views': page['views'],
                'avg_dwell_time': round(page['dwell'] / page['views']),
                'bounce_rate': percent(page['bounces'], page['views']),
            }
            for path, page in pages.items()
        ]
        return sorted(rows, key=lambda row: row['views'], reverse=True)[:limit]

    @staticmethod
    def top_products(views, limit=5):
        products = defaultdict(lambda: {'views': 0, 'dwell': 0})
        for view in views:
            if view.page_type != 'product' or not view.reference_id:
                continue
            product = products[view.reference_id]
            product.setdefault('name', view.reference_name or "Unknown")
            product['views'] += 1
            product['dwell'] += view.dwell_time

        rows = [
            {
                'id': ref,
                'name': product['name'],
                'views': product['views'],
                'avg_dwell_time': round(product['dwell'] / product['views']),
            }
            for ref, product in products.items()
        ]
        return sorted(rows, key=lambda row: row['views'], reverse=True)[:limit]

    @staticmethod
    def traffic_sources(views, limit=10):
        """UTM source first, then the referring domain, else direct."""
        sources = Counter({'direct': 0})
        for view in views:
            sources[view.utm_source or view.referrer_domain or 'direct'] += 1
        total = len(views)
        return [
            {'source': source, 'count': count, 'percentage': percent(count, total)}
            for source, count in sources.most_common(limit)
        ]


# =====================================================
# DASHBOARD
# =====================================================

class DashboardService:

    @staticmethod
    def summary():
        User = get_user_model()
        today_start, tomorrow = date_range('today')
        yesterday_start = today_start - timedelta(days=1)
        orders = Order.objects.all()
        today_orders = orders.filter(created_at__gte=today_start)
        yesterday_orders = orders.filter(created_at__gte=yesterday_start, created_at__lt=today_start)

        today_revenue = _paid_revenue(today_orders)
        yesterday_revenue = _paid_revenue(yesterday_orders)
        revenue_change = (
            round(float((today_revenue - yesterday_revenue) / yesterday_revenue * 100), 1)
            if yesterday_revenue else 0
        )
        today_count = today_orders.count()
        yesterday_count = yesterday_orders.count()

        published_products = Product.objects.filter(status=PublishStatus.PUBLISHED)
        avg_product_seo = published_products.aggregate(avg=Avg('seo_score'))['avg'] or 0
        avg_blog_seo = Blog.objects.filter(status=Blog.Status.PUBLISHED).aggregate(avg=Avg('seo_score'))['avg'] or 0

        return {
            'stats': {
                'today_revenue': today_revenue,
                'revenue_change': revenue_change,
                'today_orders': today_count,
                'orders_change': today_count - yesterday_count,
                'units_sold': OrderItem.objects.filter(order__created_at__gte=today_start).aggregate(
                    units=Coalesce(Sum('quantity'), 0)
                )['units'],
                'total_products': published_products.count(),
                'total_orders': orders.count(),
                'total_customers': User.objects.filter(role=User.Role.CUSTOMER).count(),
                'total_categories': Category.objects.filter(is_visible=True).count(),
                'total_prebuilt_pcs': PrebuiltPC.objects.filter(status=PublishStatus.PUBLISHED).count(),
                'total_blogs': Blog.objects.filter(status=Blog.Status.PUBLISHED).count(),
                'total_revenue': _paid_revenue(orders),
            },
            'alerts': {
                'low_stock_products': published_products.filter(
                    stock_quantity__gt=0, stock_quantity__lte=settings.LOW_STOCK_THRESHOLD
                ).count(),
                'out_of_stock_products': published_products.filter(stock_quantity=0).count(),
                'pending_reviews': Review.objects.filter(is_approved=False).count(),
                'new_inquiries': Inquiry.objects.filter(status=Inquiry.Status.NEW).count(),
            },
            'orders_by_status': list(
                orders.values('status').annotate(count=Count('id')).order_by('status')
            ),
            'weekly_sales': DashboardService.weekly_sales(today_start),
            'category_performance': [
                {'name': c.name, 'value': c.product_count}
                for c in Category.objects.filter(is_visible=True, parent__isnull=True)
                .annotate(product_count=Count('products')).order_by('name')
            ],
            'payment_data': [
                {'name': row['payment_method'], 'value': row['count']}
                for row in orders.values('payment_method').annotate(count=Count('id')).order_by('payment_method')
            ],
            'recent_orders': [
                {
                    'id': o.id,
                    'order_number': o.order_number,
                    'total': o.total,
                    'status': o.status,
                    'created_at': o.created_at,
                    'customer_name': o.shipping_name,
                }
                for o in orders.order_by('-created_at')[:5]
            ],
            'top_products': DashboardService.top_products(),
            'seo_score': {
                'overall': round(avg_product_seo),
                'products': round(avg_product_seo),
                'blogs': round(avg_blog_seo),
            },
            'notifications': {
                'recent': list(
                    AdminNotification.objects.order_by('-created_at').values(
                        'id', 'type', 'title', 'message', 'priority', 'action_url', 'is_read', 'created_at'
                    )[:5]
                ),
                'unread_count': AdminNotification.objects.filter(is_read=False).count(),
            },
        }

    @staticmethod
    def weekly_sales(today_start):
        """Last seven days, oldest first; sales count PAID orders only."""
        week_start = today_start - timedelta(days=6)
        buckets = {}
        for offset in range(7):
            day = (week_start + timedelta(days=offset)).date()
            buckets[day] = {'name': day.strftime('%a'), 'date': day.isoformat(), 'sales': Decimal('0'), 'orders': 0}

        for order in Order.objects.filter(created_at__gte=week_start).only('created_at', 'total', 'payment_status'):
            bucket = buckets.get(timezone.localtime(order.created_at).date())
            if bucket is None:
                continue
            bucket['orders'] += 1
            if order.payment_status == Order.PaymentStatus.PAID:
                bucket['sales'] += order.total

        for bucket in buckets.values():
            bucket['sales'] = round(bucket['sales'])
        return list(buckets.values())

    @staticmethod
    def top_products(limit=5):
        rows = (
            OrderItem.objects.filter(product__isnull=False)
            .values('product')
            .annotate(order_count=Count('id'), revenue=Sum('total'))
            .order_by('-order_count')[:limit]
        )
        products = Product.objects.in_bulk([row['product'] for row in rows])
        result = []
        for row in rows:
            product = products.get(row['product'])
            if product is None:
                continue
            image = product.primary_image
            result.append({
                'id': product.id,
                'name': product.name,
                'revenue': row['revenue'] or 0,
                'rating': product.rating_avg,
                'stock': product.stock_quantity,
                'image': image.url if image else None,
                'order_count': row['order_count'],
            })
        return result


# =====================================================
# SEO
# =====================================================

SEVERITY = {
    'missing_title': 'critical',
    'missing_description': 'critical',
    'missing_keywords': 'warning',
    'missing_og_image': 'info',
    'missing_schema': 'info',
    'missing_canonical': 'info',
    'missing_twitter': 'info',
}
CRITICAL_PAGE_ISSUES = {"Missing SEO title", "Missing meta description"}


def score_label(score):
    if score >= 80:
        return "Good"
    if score >= 60:
        return "Needs Work"
    return "Poor"


def score_buckets(scores):
    buckets = {'good': 0, 'needs_work': 0, 'poor': 0}
    for score in scores:
        buckets[score_label(score).lower().replace(' ', '_')] += 1
    return buckets


class SEOAnalyticsService:

    @staticmethod
    def entity_report(entities, extra_issues=None):
        """
        Missing-field counts, average score and fully optimised count for one entity type.

        ``extra_issues`` maps an issue name to a predicate over a single entity.
        """
        extra_issues = extra_issues or {}
        counts = Counter()
        fully_optimised = 0
        for entity in entities:
            flags = seo_issues(entity)
            flags.update({name: check(entity) for name, check in extra_issues.items()})
            counts.update(name for name, missing in flags.items() if missing)
            if not (flags['missing_title'] or flags['missing_description'] or flags['missing_keywords']
                    or flags.get('missing_content')):
                fully_optimised += 1

        scores = [entity.seo_score for entity in entities]
        return {
            'total': len(entities),
            'avg_score': round(sum(scores) / len(scores)) if scores else 0,
            'fully_optimised': fully_optimised,
            'issues': dict(counts),
            'health': score_buckets(scores),
        }

    @staticmethod
    def coverage(entities):
        return {
            'schema_markup': sum(1 for e in entities if e.json_ld),
            'canonical_urls': sum(1 for e in entities if e.canonical_url),
            'open_graph': sum(1 for e in entities if e.og_title or e.og_description),
            'twitter_cards': sum(1 for e in entities if e.twitter_title or e.twitter_description),
        }

    @staticmethod
    def static_pages():
        pages = []
        for page in PageSEO.objects.all():
            score, issues = analyze_page(page)
            pages.append({
                'page_path': page.page_path,
                'page_name': page.page_name,
                'no_index': not page.robots_index,
                'seo_score': score,
                'issues': issues,
            })
        return pages

    @staticmethod
    def report():
        products = list(Product.objects.filter(status=PublishStatus.PUBLISHED).prefetch_related('images'))
        prebuilt_pcs = list(PrebuiltPC.objects.filter(status=PublishStatus.PUBLISHED))
        categories = list(Category.objects.filter(is_visible=True).annotate(product_count=Count('products')))
        blogs = list(Blog.objects.filter(status=Blog.Status.PUBLISHED).prefetch_related('tags'))

        entities = {
            'products': SEOAnalyticsService.entity_report(products, {
                'missing_content': lambda p: not p.description.strip(),
                'missing_images': lambda p: not p.images.all(),
                'missing_image_alt': lambda p: any(not i.alt_text.strip() for i in p.images.all()),
            }),
            'prebuilt_pcs': SEOAnalyticsService.entity_report(prebuilt_pcs, {
                'missing_content': lambda pc: not pc.description.strip(),
                'missing_images': lambda pc: not pc.primary_image,
            }),
            'categories': SEOAnalyticsService.entity_report(categories, {
                'missing_content': lambda c: not c.description.strip(),
                'missing_images': lambda c: not c.image_url,
                'empty_categories': lambda c: c.product_count == 0,
            }),
            'blogs': SEOAnalyticsService.entity_report(blogs, {
                'missing_content': lambda b: not (b.excerpt or '').strip(),
                'missing_images': lambda b: not b.featured_image,
            }),
        }

        static_pages = SEOAnalyticsService.static_pages()
        indexable = [page for page in static_pages if not page['no_index']]
        static_scores = [page['seo_score'] for page in indexable]
        static_optimised = sum(1 for page in indexable if not page['issues'])

        total_items = sum(report['total'] for report in entities.values()) + len(indexable)
        optimised = sum(report['fully_optimised'] for report in entities.values()) + static_optimised
        overall = percent(optimised, total_items)

        issue_totals = Counter()
        for report in entities.values():
            for name, count in report['issues'].items():
                issue_totals[SEVERITY.get(name, 'warning')] += count
        for page in indexable:
            for issue in page['issues']:
                issue_totals['critical' if issue in CRITICAL_PAGE_ISSUES else 'info'] += 1

        return {
            'overall_score': overall,
            'score_label': score_label(overall),
            'entities': entities,
            'static_pages': {
                'pages': static_pages,
                'total': len(static_pages),
                'indexable': len(indexable),
                'avg_score': round(sum(static_scores) / len(static_scores)) if static_scores else 0,
                'fully_optimised': static_optimised,
                'needs_attention': sorted(
                    (page for page in indexable if page['seo_score'] < 80), key=lambda page: page['seo_score']
                )[:5],
            },
            'technical': {
                'products': SEOAnalyticsService.coverage(products),
                'prebuilt_pcs': SEOAnalyticsService.coverage(prebuilt_pcs),
                'categories': SEOAnalyticsService.coverage(categories),
                'blogs': SEOAnalyticsService.coverage(blogs),
            },
            'content_stats': {
                'fully_optimised': optimised,
                'partially_optimised': total_items - optimised,
                'optimisation_rate': overall,
            },
            'issues_summary': {
                'total': sum(issue_totals.values()),
                'critical': issue_totals['critical'],
                'warnings': issue_totals['warning'],
                'info': issue_totals['info'],
            },
            'project_health': SEOAnalyticsService.project_health(),
            'needs_attention': sorted(
                (
                    {'name': p.name, 'slug': p.slug, 'score': p.seo_score, 'type': 'product'}
                    for p in products
                ),
                key=lambda row: row['score'],
            )[:5],
        }

    @staticmethod
    def project_health():
        User = get_user_model()
        product_counts = dict(Product.objects.order_by().values_list('status').annotate(count=Count('id')))
        return {
            'products': {
                'total': sum(product_counts.values()),
                'published': product_counts.get(PublishStatus.PUBLISHED, 0),
                'draft': product_counts.get(PublishStatus.DRAFT, 0),
                'archived': product_counts.get(PublishStatus.ARCHIVED, 0),
            },
            'prebuilt_pcs': {
                'total': PrebuiltPC.objects.count(),
                'published': PrebuiltPC.objects.filter(status=PublishStatus.PUBLISHED).count(),
            },
            'categories': {
                'total': Category.objects.count(),
                'visible': Category.objects.filter(is_visible=True).count(),
            },
            'blogs': {
                'total': Blog.objects.count(),
                'published': Blog.objects.filter(status=Blog.Status.PUBLISHED).count(),
            },
            'orders': Order.objects.count(),
            'customers': User.objects.filter(role=User.Role.CUSTOMER).count(),
            'reviews': Review.objects.aggregate(
                total=Count('id'), approved=Count('id', filter=Q(is_approved=True))
            ),
        }
