from datetime import date
from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from analytics.models import PageView
from analytics.services import date_range, format_duration, referrer_domain, change
from configuration.models import PageSEO
from content.models import Inquiry
from store.models import Category, Product, PublishStatus
from transactions.models import Order, OrderItem


def make_view(**kwargs):
    fields = {"session_id": "s1", "page_path": "/", "page_type": "home"}
    fields.update(kwargs)
    return PageView.objects.create(**fields)


class HelperTests(TestCase):
    def test_named_ranges(self):
        wednesday = date(2024, 5, 15)
        start, end = date_range("this_week", today=wednesday)
        self.assertEqual(start.date(), date(2024, 5, 12))
        self.assertEqual(end.date(), date(2024, 5, 16))

        start, end = date_range("last_month", today=wednesday)
        self.assertEqual((start.date(), end.date()), (date(2024, 4, 1), date(2024, 5, 1)))

        start, end = date_range("last_year", today=wednesday)
        self.assertEqual((start.date(), end.date()), (date(2023, 1, 1), date(2024, 1, 1)))

        start, _ = date_range("lifetime", today=wednesday)
        self.assertEqual(start.date(), date(2020, 1, 1))

    def test_format_duration(self):
        self.assertEqual(format_duration(45), "45s")
        self.assertEqual(format_duration(125), "2m 5s")
        self.assertEqual(format_duration(3725), "1h 2m")

    def test_referrer_domain_and_change(self):
        self.assertEqual(referrer_domain("https://www.google.com/search?q=gpu"), "www.google.com")
        self.assertIsNone(referrer_domain("not a url"))
        self.assertIsNone(referrer_domain(""))
        self.assertEqual(change(15, 10), 50)
        self.assertEqual(change(3, 0), 100)
        self.assertEqual(change(0, 0), 0)


@patch("analytics.views.dispatch_task")
class TrackPageViewTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_required_fields(self, mock_dispatch):
        response = self.client.post("/api/analytics/track/", {"session_id": "s1"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "session_id, page_path and page_type are required")
        mock_dispatch.assert_not_called()

    def test_records_view_and_checks_milestones(self, mock_dispatch):
        response = self.client.post("/api/analytics/track/", {
            "session_id": "s1",
            "visitor_id": "v1",
            "page_path": "/products/ryzen-5-7600",
            "page_type": "product",
            "referrer": "https://www.google.com/",
            "device_type": "mobile",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        view = PageView.objects.get(pk=response.data["data"]["view_id"])
        self.assertEqual(view.referrer_domain, "www.google.com")
        self.assertTrue(view.is_bounce)
        self.assertIsNone(view.user)
        mock_dispatch.assert_called_once()

    def test_engagement_update(self, mock_dispatch):
        view = make_view()
        response = self.client.put("/api/analytics/track/", {
            "view_id": view.id, "dwell_time": 42, "scroll_depth": 80, "is_bounce": False, "is_exit": True,
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        view.refresh_from_db()
        self.assertEqual(view.dwell_time, 42)
        self.assertEqual(view.scroll_depth, 80)
        self.assertFalse(view.is_bounce)
        self.assertIsNotNone(view.exited_at)

    def test_engagement_errors(self, mock_dispatch):
        response = self.client.put("/api/analytics/track/", {"dwell_time": 5}, format="json")
        self.assertEqual(response.data["error"], "view_id is required")
        response = self.client.put("/api/analytics/track/", {"view_id": 999}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class AdminReportTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.admin = User.objects.create_superuser(email="admin@test.com", password="pass12345")
        self.client = APIClient()
        self.client.force_authenticate(user=self.admin)

    def test_traffic_report(self):
        make_view(page_path="/", device_type="desktop", dwell_time=30, is_bounce=False, utm_source="instagram")
        make_view(session_id="s2", visitor_id="v2", page_path="/", device_type="mobile",
                  referrer_domain="www.google.com")
        make_view(session_id="s3", page_path="/products/gpu", page_type="product", reference_id="7",
                  reference_name="RTX 4060", dwell_time=90)

        response = self.client.get("/api/admin/analytics/", {"filter": "today"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data["data"]
        overview = data["overview"]
        self.assertEqual(overview["total_page_views"], 3)
        self.assertEqual(overview["unique_sessions"], 3)
        self.assertEqual(overview["avg_dwell_time"], 60)
        self.assertEqual(overview["avg_dwell_time_formatted"], "1m 0s")
        self.assertEqual(overview["bounce_rate"], 67)
        self.assertEqual(overview["page_views_change"], 100)

        self.assertEqual(data["device_breakdown"], {"desktop": 1, "mobile": 1, "tablet": 0})
        self.assertEqual(data["top_pages"][0]["path"], "/")
        self.assertEqual(data["top_pages"][0]["views"], 2)
        self.assertEqual(data["top_products"][0]["name"], "RTX 4060")
        sources = {row["source"]: row["count"] for row in data["traffic_sources"]}
        self.assertEqual(sources, {"instagram": 1, "www.google.com": 1, "direct": 1})
        self.assertEqual(sum(data["hourly_breakdown"].values()), 3)
        self.assertIsNone(data["daily_breakdown"])

        response = self.client.get("/api/admin/analytics/", {"filter": "this_month"})
        self.assertIsNone(response.data["data"]["hourly_breakdown"])
        self.assertEqual(response.data["data"]["daily_breakdown"][0]["views"], 3)

    def test_dashboard(self):
        category = Category.objects.create(name="Graphics Cards", slug="graphics-cards")
        product = Product.objects.create(
            name="RTX 4060", sku="RTX-4060", price=Decimal("30000.00"), stock_quantity=3,
            primary_category=category, status=PublishStatus.PUBLISHED,
        )
        order = Order.objects.create(
            payment_method=Order.PaymentMethod.RAZORPAY, payment_status=Order.PaymentStatus.PAID,
            subtotal=Decimal("30000.00"), total=Decimal("35400.00"), shipping_name="Ravi Kumar",
            shipping_mobile="9876543210", shipping_address1="12 MG Road, Shivaji Nagar",
            shipping_city="Pune", shipping_state="Maharashtra", shipping_pincode="411001",
        )
        OrderItem.objects.create(order=order, product=product, name=product.name, price=product.price,
                                 quantity=2, total=Decimal("60000.00"))
        Inquiry.objects.create(name="Anil", mobile="9876543210")

        response = self.client.get("/api/admin/dashboard/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data["data"]
        self.assertEqual(data["stats"]["today_orders"], 1)
        self.assertEqual(data["stats"]["today_revenue"], Decimal("35400.00"))
        self.assertEqual(data["stats"]["units_sold"], 2)
        self.assertEqual(data["stats"]["total_products"], 1)
        self.assertEqual(data["alerts"]["low_stock_products"], 1)
        self.assertEqual(data["alerts"]["new_inquiries"], 1)
        self.assertEqual(data["weekly_sales"][-1]["sales"], 35400)
        self.assertEqual(len(data["weekly_sales"]), 7)
        self.assertEqual(data["top_products"][0]["name"], "RTX 4060")
        self.assertEqual(data["recent_orders"][0]["order_number"], order.order_number)
        self.assertEqual(data["category_performance"], [{"name": "Graphics Cards", "value": 1}])

    def test_seo_report(self):
        category = Category.objects.create(name="Processors", slug="processors")
        Product.objects.create(
            name="Ryzen 5 7600", sku="R5-7600", price=Decimal("18000.00"), primary_category=category,
            status=PublishStatus.PUBLISHED, seo_title="Ryzen 5 7600 Processor at the best price",
            seo_description="Buy online", seo_keywords="ryzen, amd", description="Six cores",
        )
        Product.objects.create(
            name="Draft CPU", sku="DRAFT-CPU", price=Decimal("1000.00"), primary_category=category,
        )
        PageSEO.objects.create(page_path="/cart", page_name="Cart", robots_index=False)
        PageSEO.objects.create(page_path="/", page_name="Home", seo_title="Sai Computer Bazar")

        response = self.client.get("/api/admin/seo-analytics/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data["data"]
        products = data["entities"]["products"]
        self.assertEqual(products["total"], 1)
        self.assertEqual(products["fully_optimised"], 1)
        self.assertEqual(products["issues"]["missing_images"], 1)
        self.assertEqual(data["entities"]["categories"]["issues"]["missing_title"], 1)

        pages = {page["page_path"]: page for page in data["static_pages"]["pages"]}
        self.assertEqual(pages["/cart"]["seo_score"], 100)
        self.assertEqual(pages["/"]["seo_score"], 25)
        self.assertEqual(data["static_pages"]["indexable"], 1)
        self.assertEqual(data["project_health"]["products"], {"total": 2, "published": 1, "draft": 1, "archived": 0})

    def test_customers_are_rejected(self):
        customer = get_user_model().objects.create_user(email="c@test.com", password="pass12345")
        self.client.force_authenticate(user=customer)
        for url in ("/api/admin/analytics/", "/api/admin/dashboard/", "/api/admin/seo-analytics/"):
            self.assertEqual(self.client.get(url).status_code, status.HTTP_403_FORBIDDEN)
