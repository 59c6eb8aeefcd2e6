from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from configuration.models import SiteSetting, PageSEO
from configuration.services import SettingsService


class SettingsServiceTests(TestCase):
    def setUp(self):
        cache.clear()

    def test_registry_default_used_when_nothing_stored(self):
        self.assertEqual(SettingsService.get("seasonal_intensity"), "medium")
        self.assertFalse(SettingsService.get_bool("smtp_enabled"))

    def test_stored_value_wins_over_environment(self):
        with self.settings(RAZORPAY_KEY_ID="env_key", RAZORPAY_KEY_SECRET="env_secret"):
            self.assertEqual(SettingsService.get_razorpay_keys()["key_id"], "env_key")
            SettingsService.update({"razorpay_key_id": "rzp_live_db"})
            self.assertEqual(SettingsService.get_razorpay_keys()["key_id"], "rzp_live_db")
            self.assertEqual(SettingsService.get_razorpay_keys()["key_secret"], "env_secret")

    def test_update_skips_unknown_keys(self):
        written = SettingsService.update({"store_name": "Sai Computers", "not_a_setting": "x"})
        self.assertEqual(written, ["store_name"])
        row = SiteSetting.objects.get(key="store_name")
        self.assertEqual(row.group, "store")
        self.assertFalse(SiteSetting.objects.filter(key="not_a_setting").exists())

    def test_smtp_config_only_when_enabled(self):
        SettingsService.update({"smtp_host": "smtp.example.com", "smtp_port": "465"})
        self.assertIsNone(SettingsService.get_smtp_config())

        SettingsService.update({"smtp_enabled": "true", "smtp_from_email": "shop@example.com", "smtp_from_name": "Sai"})
        config = SettingsService.get_smtp_config()
        self.assertEqual(config["port"], 465)
        self.assertTrue(config["use_ssl"])
        self.assertEqual(config["from_email"], "Sai <shop@example.com>")

    def test_seasonal_defaults_and_disabled_theme(self):
        seasonal = SettingsService.get_seasonal()
        self.assertEqual(seasonal["theme"], "winter")
        self.assertTrue(seasonal["enabled"])
        self.assertTrue(seasonal["snow_enabled"])
        self.assertEqual(seasonal["intensity"], "medium")

        SettingsService.update({"seasonal_theme": "none"})
        self.assertEqual(SettingsService.get_seasonal(), {"enabled": False, "theme": "none"})


class AdminSettingsApiTests(TestCase):
    def setUp(self):
        cache.clear()
        User = get_user_model()
        self.admin = User.objects.create_superuser(email="admin@test.com", password="pass12345")
        self.customer = User.objects.create_user(email="customer@test.com", password="pass12345")
        self.client = APIClient()
        self.client.force_authenticate(user=self.admin)

    def test_get_returns_groups_with_defaults(self):
        response = self.client.get("/api/admin/settings/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        groups = {g["key"]: g for g in response.data["data"]["groups"]}
        self.assertIn("razorpay", groups)
        seasonal_fields = {f["key"]: f["value"] for f in groups["seasonal"]["fields"]}
        self.assertEqual(seasonal_fields["seasonal_theme"], "none")

    def test_put_requires_settings_object(self):
        response = self.client.put("/api/admin/settings/", {"settings": "nope"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Invalid settings data")

    def test_put_updates_settings(self):
        response = self.client.put(
            "/api/admin/settings/", {"settings": {"store_phone": "+91 99999 00000"}}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "Settings updated successfully")
        self.assertEqual(SiteSetting.objects.get(key="store_phone").value, "+91 99999 00000")

    def test_customer_cannot_read_settings(self):
        self.client.force_authenticate(user=self.customer)
        response = self.client.get("/api/admin/settings/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class UploadApiTests(TestCase):
    def setUp(self):
        self.admin = get_user_model().objects.create_superuser(email="admin@test.com", password="pass12345")
        self.client = APIClient()
        self.client.force_authenticate(user=self.admin)

    def test_rejects_unsupported_type(self):
        upload = SimpleUploadedFile("notes.txt", b"hello", content_type="text/plain")
        response = self.client.post("/api/admin/upload/", {"file": upload}, format="multipart")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("Invalid file type", response.data["error"])

    def test_rejects_large_file(self):
        upload = SimpleUploadedFile("big.png", b"0" * (2 * 1024 * 1024 + 1), content_type="image/png")
        response = self.client.post("/api/admin/upload/", {"file": upload}, format="multipart")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "File too large. Maximum size is 2MB.")

    @patch("configuration.views.cloudinary.uploader.upload")
    def test_uploads_to_folder(self, mock_upload):
        mock_upload.return_value = {"secure_url": "https://cdn.example.com/a.png", "public_id": "sai-computers/banners/a"}
        upload = SimpleUploadedFile("a.png", b"\x89PNG", content_type="image/png")

        response = self.client.post("/api/admin/upload/", {"file": upload, "folder": "banners"}, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["url"], "https://cdn.example.com/a.png")
        self.assertEqual(mock_upload.call_args.kwargs["folder"], "sai-computers/banners")


class PageSEOTests(TestCase):
    def test_noindex_page_scores_full(self):
        page = PageSEO.objects.create(page_path="/cart", page_name="Cart", robots_index=False)
        self.assertEqual(page.seo_score, 100)

    def test_score_counts_filled_fields(self):
        page = PageSEO.objects.create(
            page_path="/", page_name="Home",
            seo_title="Sai Computer Bazar", seo_description="Computer hardware store",
        )
        self.assertEqual(page.seo_score, 50)
        self.assertIn("Missing keywords", page.issues)

    def test_admin_upsert_by_path(self):
        admin = get_user_model().objects.create_superuser(email="admin@test.com", password="pass12345")
        client = APIClient()
        client.force_authenticate(user=admin)

        response = client.put("/api/admin/page-seo/", {"page_path": "about", "page_name": "About"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = client.put("/api/admin/page-seo/", {"page_path": "/about", "seo_title": "About us"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(PageSEO.objects.get(page_path="/about").seo_title, "About us")


class SeasonalApiTests(TestCase):
    def setUp(self):
        cache.clear()

    def test_public_seasonal(self):
        response = APIClient().get("/api/seasonal/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["theme"], "winter")
