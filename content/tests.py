from datetime import timedelta
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.core import mail
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from authentication.models import AdminAuditLog
from content.models import Blog, BlogCategory, HeroBanner, Inquiry, content_slug, reading_time
from content.tasks import publish_scheduled_blogs
from transactions.models import Order
from users.notification_models import AdminNotification

LONG_CONTENT = "<p>" + " ".join(["word"] * 450) + "</p>"


def make_blog(title="Best Gaming PC Builds", status_=Blog.Status.PUBLISHED, **kwargs):
    return Blog.objects.create(title=title, content=kwargs.pop("content", LONG_CONTENT), status=status_, **kwargs)


class ContentHelperTests(TestCase):
    def test_slug_rules(self):
        self.assertEqual(content_slug("Best Gaming PC 2024!"), "best-gaming-pc-2024")
        self.assertEqual(content_slug("  RTX 4060 -- vs --  RX 7600 "), "rtx-4060-vs-rx-7600")
        self.assertEqual(content_slug("Ñoño & co"), "oo-co")

    def test_reading_time_ignores_markup(self):
        self.assertEqual(reading_time(LONG_CONTENT), 3)
        self.assertEqual(reading_time("<p>short</p>"), 1)
        self.assertEqual(reading_time(""), 0)

    def test_save_fills_slug_reading_time_and_publish_date(self):
        blog = make_blog()
        self.assertEqual(blog.slug, "best-gaming-pc-builds")
        self.assertEqual(blog.reading_time, 3)
        self.assertIsNotNone(blog.published_at)
        self.assertGreater(blog.seo_score, 0)

        draft = make_blog(title="Draft post", status_=Blog.Status.DRAFT)
        self.assertIsNone(draft.published_at)

    def test_set_tags_dedupes_and_rescores(self):
        blog = make_blog(seo_title="Best Gaming PC Builds for 2024 on every budget")
        before = blog.seo_score
        blog.set_tags(["GPU", "gpu", " Builds ", ""])
        self.assertEqual(blog.tag_names, ["GPU", "Builds"])
        blog.refresh_from_db()
        self.assertEqual(blog.seo_score, before + 10)


class AdminBlogTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.admin = User.objects.create_superuser(email="admin@test.com", password="pass12345")
        self.client = APIClient()
        self.client.force_authenticate(user=self.admin)
        self.category = BlogCategory.objects.create(name="Guides", slug="guides")

    def test_title_and_content_required(self):
        response = self.client.post("/api/admin/blogs/", {"title": "No body"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Title and content are required")

    def test_create_with_tags_and_category(self):
        response = self.client.post("/api/admin/blogs/", {
            "title": "How to pick a PSU",
            "content": LONG_CONTENT,
            "category_id": self.category.id,
            "tags": ["Power", "PSU"],
            "status": "PUBLISHED",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["message"], "Blog created successfully")
        blog = Blog.objects.get(slug="how-to-pick-a-psu")
        self.assertEqual(blog.category, self.category)
        self.assertEqual(blog.tag_names, ["Power", "PSU"])
        self.assertIsNotNone(blog.published_at)

    def test_duplicate_title_gets_timestamp_suffix(self):
        make_blog(title="Budget builds")
        response = self.client.post("/api/admin/blogs/", {"title": "Budget builds", "content": "<p>again</p>"},
                                    format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        slug = response.data["data"]["slug"]
        self.assertTrue(slug.startswith("budget-builds-"))
        self.assertTrue(slug.rsplit("-", 1)[1].isdigit())

    def test_update_rejects_taken_slug(self):
        make_blog(title="Taken")
        blog = make_blog(title="Mine")
        response = self.client.put(f"/api/admin/blogs/{blog.id}/", {"slug": "taken"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Slug already exists")

    def test_title_change_regenerates_slug_and_replaces_tags(self):
        blog = make_blog(title="Old title")
        blog.set_tags(["old"])
        response = self.client.put(
            f"/api/admin/blogs/{blog.id}/", {"title": "New title", "tags": ["fresh"]}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "Blog updated successfully")
        blog.refresh_from_db()
        self.assertEqual(blog.slug, "new-title")
        self.assertEqual(blog.tag_names, ["fresh"])

    def test_list_filters_and_stats(self):
        make_blog(title="Live", is_featured=True, category=self.category, view_count=5)
        make_blog(title="Draft", status_=Blog.Status.DRAFT, view_count=2)
        make_blog(title="Later", status_=Blog.Status.SCHEDULED, scheduled_at=timezone.now() + timedelta(days=1))

        response = self.client.get("/api/admin/blogs/")
        stats = response.data["data"]["stats"]
        self.assertEqual(stats["total"], 3)
        self.assertEqual(stats["published"], 1)
        self.assertEqual(stats["draft"], 1)
        self.assertEqual(stats["scheduled"], 1)
        self.assertEqual(stats["featured"], 1)
        self.assertEqual(stats["total_views"], 7)

        response = self.client.get("/api/admin/blogs/", {"status": "draft"})
        self.assertEqual([b["title"] for b in response.data["data"]["blogs"]], ["Draft"])
        response = self.client.get("/api/admin/blogs/", {"category": self.category.id, "featured": "true"})
        self.assertEqual([b["title"] for b in response.data["data"]["blogs"]], ["Live"])

    def test_delete_and_not_found(self):
        blog = make_blog()
        response = self.client.delete(f"/api/admin/blogs/{blog.id}/")
        self.assertEqual(response.data["message"], "Blog deleted successfully")
        response = self.client.get(f"/api/admin/blogs/{blog.id}/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "Blog not found")

    def test_category_crud(self):
        response = self.client.post("/api/admin/blog-categories/", {"name": ""}, format="json")
        self.assertEqual(response.data["error"], "Category name is required")

        response = self.client.post("/api/admin/blog-categories/", {"name": "Guides"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data["data"]["slug"].startswith("guides-"))

        response = self.client.put(f"/api/admin/blog-categories/{self.category.id}/", {"color": "#000000"},
                                   format="json")
        self.assertEqual(response.data["message"], "Category updated successfully")
        response = self.client.put("/api/admin/blog-categories/9999/", {"name": "x"}, format="json")
        self.assertEqual(response.data["error"], "Category not found")

    def test_customers_are_rejected(self):
        customer = get_user_model().objects.create_user(email="c@test.com", password="pass12345")
        self.client.force_authenticate(user=customer)
        response = self.client.get("/api/admin/blogs/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class PublicBlogTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.category = BlogCategory.objects.create(name="Guides", slug="guides")

    def test_only_live_posts_listed_featured_first(self):
        make_blog(title="Older", published_at=timezone.now() - timedelta(days=3))
        make_blog(title="Pinned", is_featured=True, published_at=timezone.now() - timedelta(days=5))
        make_blog(title="Hidden", status_=Blog.Status.DRAFT)
        make_blog(title="Future", published_at=timezone.now() + timedelta(days=2))

        response = self.client.get("/api/blogs/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        titles = [b["title"] for b in response.data["data"]["blogs"]]
        self.assertEqual(titles, ["Pinned", "Older"])
        self.assertEqual(response.data["data"]["pagination"]["limit"], 12)

    def test_category_and_tag_filters(self):
        guide = make_blog(title="Guide", category=self.category)
        guide.set_tags(["GPU"])
        make_blog(title="Other")

        response = self.client.get("/api/blogs/", {"category": "guides"})
        self.assertEqual([b["title"] for b in response.data["data"]["blogs"]], ["Guide"])
        response = self.client.get("/api/blogs/", {"tag": "gpu"})
        self.assertEqual([b["title"] for b in response.data["data"]["blogs"]], ["Guide"])
        self.assertEqual(response.data["data"]["popular_tags"][0]["name"], "GPU")

    def test_detail_counts_view_and_lists_related(self):
        blog = make_blog(title="Main", category=self.category)
        make_blog(title="Sibling", category=self.category)
        make_blog(title="Unrelated")

        response = self.client.get(f"/api/blogs/{blog.slug}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["blog"]["view_count"], 1)
        self.assertEqual([b["title"] for b in response.data["data"]["related"]], ["Sibling"])
        blog.refresh_from_db()
        self.assertEqual(blog.view_count, 1)

    def test_draft_detail_not_found(self):
        draft = make_blog(title="Secret", status_=Blog.Status.DRAFT)
        response = self.client.get(f"/api/blogs/{draft.slug}/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_scheduled_posts_published_by_task(self):
        due = make_blog(title="Due", status_=Blog.Status.SCHEDULED, scheduled_at=timezone.now() - timedelta(minutes=1))
        later = make_blog(title="Later", status_=Blog.Status.SCHEDULED,
                          scheduled_at=timezone.now() + timedelta(hours=1))

        result = publish_scheduled_blogs()
        self.assertEqual(result["published"], 1)
        due.refresh_from_db()
        later.refresh_from_db()
        self.assertEqual(due.status, Blog.Status.PUBLISHED)
        self.assertEqual(due.published_at, due.scheduled_at)
        self.assertEqual(later.status, Blog.Status.SCHEDULED)


class HeroBannerTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_public_list_respects_location_and_window(self):
        now = timezone.now()
        HeroBanner.objects.create(location="HOME", title="Second", sort_order=2)
        HeroBanner.objects.create(location="HOME", title="First", sort_order=1)
        HeroBanner.objects.create(location="HOME", title="Off", is_active=False)
        HeroBanner.objects.create(location="HOME", title="Upcoming", start_date=now + timedelta(days=1))
        HeroBanner.objects.create(location="HOME", title="Ended", end_date=now - timedelta(days=1))
        HeroBanner.objects.create(location="PREBUILT_PC", title="PC sale")

        response = self.client.get("/api/hero-banners/")
        self.assertEqual([b["title"] for b in response.data["data"]], ["First", "Second"])
        response = self.client.get("/api/hero-banners/", {"location": "prebuilt_pc"})
        self.assertEqual([b["title"] for b in response.data["data"]], ["PC sale"])
        response = self.client.get("/api/hero-banners/", {"limit": "1"})
        self.assertEqual(len(response.data["data"]), 1)

    def test_admin_create_requires_location_and_title(self):
        admin = get_user_model().objects.create_superuser(email="admin@test.com", password="pass12345")
        self.client.force_authenticate(user=admin)
        response = self.client.post("/api/admin/hero-banners/", {"title": "No location"}, format="json")
        self.assertEqual(response.data["error"], "Location and title are required")

        response = self.client.post("/api/admin/hero-banners/", {"location": "HOME", "title": "Diwali"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        banner_id = response.data["data"]["id"]
        response = self.client.patch(f"/api/admin/hero-banners/{banner_id}/", {"is_active": False}, format="json")
        self.assertFalse(response.data["data"]["is_active"])


class InquiryTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_public_create_notifies_admin(self):
        response = self.client.post("/api/inquiries/", {
            "type": "MODAL_WEB", "name": "Anil", "mobile": "9876543210", "requirement": "Gaming PC under 80k",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["message"], "Inquiry submitted successfully")
        inquiry = Inquiry.objects.get(pk=response.data["data"]["inquiry_id"])
        self.assertEqual(inquiry.status, Inquiry.Status.NEW)
        self.assertTrue(AdminNotification.objects.filter(
            type=AdminNotification.Type.NEW_INQUIRY, entity_id=str(inquiry.id)
        ).exists())

    def test_public_create_validation(self):
        response = self.client.post("/api/inquiries/", {"name": "Anil"}, format="json")
        self.assertEqual(response.data["error"], "Name and mobile are required")
        response = self.client.post("/api/inquiries/", {"name": "Anil", "mobile": "9876543210", "type": "FAX"},
                                    format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Invalid inquiry type")

        response = self.client.post("/api/inquiries/", {"name": "Anil", "mobile": "9876543210"}, format="json")
        self.assertEqual(Inquiry.objects.get(pk=response.data["data"]["inquiry_id"]).type, Inquiry.Type.MANUAL)

    def test_admin_list_stats_update_delete(self):
        admin = get_user_model().objects.create_superuser(email="admin@test.com", password="pass12345")
        self.client.force_authenticate(user=admin)
        first = Inquiry.objects.create(name="Anil", mobile="9876543210", type="PHONE_CALL")
        Inquiry.objects.create(name="Sunita", mobile="9123456780", type="WALK_IN", status="CONTACTED")

        response = self.client.get("/api/admin/inquiries/")
        stats = response.data["data"]["stats"]
        self.assertEqual(stats["total"], 2)
        self.assertEqual(stats["today"], 2)
        self.assertEqual(stats["by_type"], {"PHONE_CALL": 1, "WALK_IN": 1})
        self.assertEqual(stats["by_status"]["NEW"], 1)

        response = self.client.get("/api/admin/inquiries/", {"search": "sunita"})
        self.assertEqual(len(response.data["data"]["inquiries"]), 1)

        response = self.client.put(f"/api/admin/inquiries/{first.id}/", {
            "status": "FOLLOW_UP", "note": "Call back Monday", "assigned_to": "Rahul",
        }, format="json")
        self.assertEqual(response.data["message"], "Inquiry updated successfully")
        first.refresh_from_db()
        self.assertEqual(first.status, Inquiry.Status.FOLLOW_UP)
        self.assertEqual(first.assigned_to, "Rahul")

        response = self.client.delete(f"/api/admin/inquiries/{first.id}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.put(f"/api/admin/inquiries/{first.id}/", {"status": "NEW"}, format="json")
        self.assertEqual(response.data["error"], "Inquiry not found")


class MarketingEmailTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.admin = User.objects.create_superuser(email="admin@test.com", password="pass12345")
        self.client = APIClient()
        self.client.force_authenticate(user=self.admin)
        Inquiry.objects.create(name="Anil", mobile="9876543210", email="anil@example.com")
        Inquiry.objects.create(name="No Mail", mobile="9123456780")

    def test_recipients_by_type(self):
        buyer = get_user_model().objects.create_user(email="buyer@test.com", password="pass12345", full_name="Buyer")
        get_user_model().objects.create_user(email="browser@test.com", password="pass12345")
        Order.objects.create(
            user=buyer, payment_method=Order.PaymentMethod.COD, subtotal=100, total=100,
            shipping_name="Buyer", shipping_mobile="9876543210",
            shipping_address1="12 MG Road, Shivaji Nagar", shipping_city="Pune", shipping_state="MH",
            shipping_pincode="411001",
        )

        response = self.client.get("/api/admin/marketing/email/")
        self.assertEqual([r["email"] for r in response.data["data"]["recipients"]], ["anil@example.com"])
        response = self.client.get("/api/admin/marketing/email/", {"type": "customers"})
        self.assertEqual([r["email"] for r in response.data["data"]["recipients"]], ["buyer@test.com"])
        response = self.client.get("/api/admin/marketing/email/", {"type": "all_users"})
        self.assertEqual(response.data["data"]["total"], 2)

    def test_subject_and_content_required(self):
        response = self.client.post("/api/admin/marketing/email/", {"subject": "Sale"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Subject and content are required")

    def test_no_recipients(self):
        response = self.client.post("/api/admin/marketing/email/", {
            "recipient_type": "customers", "subject": "Sale", "content": "<p>Hi</p>",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "No recipients found")

    def test_personalised_send_is_logged(self):
        response = self.client.post("/api/admin/marketing/email/", {
            "recipient_type": "inquiries",
            "subject": "Hi {{name}}",
            "content": "<p>Deals for {{email}}</p>",
            "button_text": "Shop now",
            "button_url": "https://example.com/deals",
        }, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "Emails sent: 1, Failed: 0")
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].subject, "Hi Anil")
        html = mail.outbox[0].alternatives[0][0]
        self.assertIn("anil@example.com", html)
        self.assertIn("https://example.com/deals", html)
        self.assertTrue(AdminAuditLog.objects.filter(action=AdminAuditLog.Action.MARKETING_EMAIL_SENT).exists())

    def test_failures_are_counted(self):
        for i in range(11):
            Inquiry.objects.create(name=f"Lead {i}", mobile="9876543210", email=f"lead{i}@example.com")
        with patch("content.services.EmailMultiAlternatives.send", side_effect=[1] * 11 + [OSError("refused")]):
            response = self.client.post("/api/admin/marketing/email/", {
                "recipient_type": "inquiries", "subject": "Sale", "content": "<p>Hi {{name}}</p>",
            }, format="json")
        self.assertEqual(response.data["data"]["sent"], 11)
        self.assertEqual(response.data["data"]["failed"], 1)
        self.assertEqual(len(response.data["data"]["errors"]), 1)
