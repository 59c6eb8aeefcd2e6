from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.core import mail
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from users.models import Address
from users.notification_models import AdminNotification, MilestoneTracker
from users.notification_service import (
    NotificationService, MilestoneService, DAILY_REVENUE_MILESTONES, format_indian_currency, format_indian_number,
)
from users.notification_tasks import check_milestones_task, send_admin_notification_email

ADDRESS = {
    "full_name": "Ravi Kumar",
    "mobile": "9876543210",
    "address_line1": "12 MG Road, Shivaji Nagar",
    "city": "Pune",
    "state": "Maharashtra",
    "pincode": "411001",
}


class AddressBookTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.client = APIClient()
        self.customer = User.objects.create_user(email="cust@test.com", password="pass12345")
        self.client.force_authenticate(user=self.customer)

    def test_first_address_becomes_default(self):
        response = self.client.post("/api/account/addresses/", ADDRESS, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data["data"]["is_default"])
        self.assertEqual(response.data["data"]["label"], "Home")

        response = self.client.post("/api/account/addresses/", {**ADDRESS, "label": "Office"}, format="json")
        self.assertFalse(response.data["data"]["is_default"])

    def test_validation_messages(self):
        response = self.client.post("/api/account/addresses/", {**ADDRESS, "mobile": "12345"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Please enter a valid 10-digit mobile number")

        response = self.client.post("/api/account/addresses/", {**ADDRESS, "address_line1": "Short"}, format="json")
        self.assertEqual(response.data["error"], "Please enter a complete address")

    def test_make_default_clears_other_defaults(self):
        first = Address.objects.create(user=self.customer, is_default=True, **ADDRESS)
        second = Address.objects.create(user=self.customer, label="Office", **ADDRESS)

        response = self.client.post(f"/api/account/addresses/{second.id}/make-default/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        first.refresh_from_db()
        second.refresh_from_db()
        self.assertFalse(first.is_default)
        self.assertTrue(second.is_default)

    def test_deleting_default_promotes_newest(self):
        first = Address.objects.create(user=self.customer, is_default=True, **ADDRESS)
        second = Address.objects.create(user=self.customer, label="Office", **ADDRESS)

        response = self.client.delete(f"/api/account/addresses/{first.id}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        second.refresh_from_db()
        self.assertTrue(second.is_default)

    def test_cannot_unset_only_default(self):
        address = Address.objects.create(user=self.customer, is_default=True, **ADDRESS)
        response = self.client.patch(f"/api/account/addresses/{address.id}/", {"is_default": False}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        address.refresh_from_db()
        self.assertTrue(address.is_default)

    def test_other_users_addresses_are_hidden(self):
        other = get_user_model().objects.create_user(email="other@test.com", password="pass12345")
        address = Address.objects.create(user=other, **ADDRESS)
        response = self.client.get(f"/api/account/addresses/{address.id}/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "Address not found")


class AdminNotificationTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.client = APIClient()
        self.admin = User.objects.create_superuser(email="admin@test.com", password="pass12345")
        self.client.force_authenticate(user=self.admin)
        self.order_alert = NotificationService.create_notification(
            type=AdminNotification.Type.NEW_ORDER, title="New Order Received", message="Order SCB1",
        )
        self.system_alert = NotificationService.create_notification(
            type=AdminNotification.Type.SYSTEM, title="Backup finished", message="ok",
        )

    def test_new_customer_signup_raises_notification(self):
        get_user_model().objects.create_user(email="new@test.com", password="pass12345", full_name="Neha")
        notification = AdminNotification.objects.get(type=AdminNotification.Type.NEW_USER)
        self.assertEqual(notification.message, "Neha (new@test.com) just signed up")

    def test_list_filters_and_unread_count(self):
        self.system_alert.mark_as_read()
        response = self.client.get("/api/admin/notifications/", {"unread": "true"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ids = [n["id"] for n in response.data["data"]["notifications"]]
        self.assertEqual(ids, [self.order_alert.id])
        self.assertEqual(response.data["data"]["unread_count"], 1)

        response = self.client.get("/api/admin/notifications/", {"type": "SYSTEM"})
        self.assertEqual(len(response.data["data"]["notifications"]), 1)

    def test_mark_read_and_unread(self):
        response = self.client.post(
            "/api/admin/notifications/mark_as_read/", {"notification_id": self.order_alert.id}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.order_alert.refresh_from_db()
        self.assertTrue(self.order_alert.is_read)
        self.assertIsNotNone(self.order_alert.read_at)

        self.client.post(
            "/api/admin/notifications/mark_as_unread/", {"notification_id": self.order_alert.id}, format="json"
        )
        self.order_alert.refresh_from_db()
        self.assertFalse(self.order_alert.is_read)

        response = self.client.post("/api/admin/notifications/mark_as_read/", {}, format="json")
        self.assertEqual(response.data["error"], "notification_id is required")
        response = self.client.post(
            "/api/admin/notifications/mark_as_read/", {"notification_id": 9999}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_bulk_actions(self):
        response = self.client.post("/api/admin/notifications/mark_all_as_read/")
        self.assertEqual(response.data["data"]["count"], 2)
        response = self.client.get("/api/admin/notifications/unread_count/")
        self.assertEqual(response.data["data"]["unread_count"], 0)

        NotificationService.create_notification(type=AdminNotification.Type.SYSTEM, title="Fresh", message="x")
        response = self.client.post("/api/admin/notifications/delete_read/")
        self.assertEqual(response.data["data"]["count"], 2)
        self.assertEqual(AdminNotification.objects.count(), 1)

    def test_delete_one(self):
        response = self.client.delete(f"/api/admin/notifications/{self.order_alert.id}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.delete(f"/api/admin/notifications/{self.order_alert.id}/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_customers_are_rejected(self):
        customer = get_user_model().objects.create_user(email="c@test.com", password="pass12345")
        self.client.force_authenticate(user=customer)
        response = self.client.get("/api/admin/notifications/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    @patch("users.notification_service.dispatch_task")
    @patch.object(NotificationService, "send_websocket_notification")
    def test_urgent_notification_is_emailed_after_commit(self, mock_push, mock_dispatch):
        with self.captureOnCommitCallbacks(execute=True):
            notification = NotificationService.create_notification(
                type=AdminNotification.Type.LOW_STOCK, title="Low Stock Alert", message="2 left",
                priority=AdminNotification.Priority.URGENT,
            )
        mock_push.assert_called_once_with(notification)
        mock_dispatch.assert_called_once_with(send_admin_notification_email, notification.id)

    @override_settings(ADMIN_NOTIFICATION_EMAIL="ops@saicomputerbazar.com")
    def test_notification_email_task(self):
        result = send_admin_notification_email(self.order_alert.id)
        self.assertEqual(result["status"], "success")
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].subject, "[NORMAL] New Order Received")
        self.assertEqual(mail.outbox[0].to, ["ops@saicomputerbazar.com"])

    @override_settings(ADMIN_NOTIFICATION_EMAIL=None)
    def test_notification_email_skipped_without_recipient(self):
        self.assertEqual(send_admin_notification_email(self.order_alert.id)["status"], "skipped")
        self.assertEqual(send_admin_notification_email(9999)["status"], "missing")


class MilestoneTests(TestCase):
    def test_indian_formatting(self):
        self.assertEqual(format_indian_number(1234567), "12,34,567")
        self.assertEqual(format_indian_number(999), "999")
        self.assertEqual(format_indian_currency(150000), "₹1.50 L")
        self.assertEqual(format_indian_currency(25000000), "₹2.50 Cr")
        self.assertEqual(format_indian_currency(5000), "₹5.0K")

    def test_customer_milestone_announced_once(self):
        User = get_user_model()
        for i in range(10):
            User.objects.create_user(email=f"c{i}@test.com", password="pass12345")

        check_milestones_task()
        check_milestones_task()

        alerts = AdminNotification.objects.filter(type=AdminNotification.Type.MILESTONE_USERS)
        self.assertEqual(alerts.count(), 1)
        self.assertEqual(alerts.get().message, "You now have 10 registered customers!")
        tracker = MilestoneTracker.objects.get(type="users", period=MilestoneTracker.Period.ALL_TIME)
        self.assertEqual(tracker.last_milestone, Decimal("10"))

    def test_highest_crossed_threshold_wins(self):
        reached = MilestoneService.check("orders", MilestoneTracker.Period.ALL_TIME, 75, [10, 50, 100])
        self.assertEqual(reached, 50)
        self.assertIsNone(MilestoneService.check("orders", MilestoneTracker.Period.ALL_TIME, 80, [10, 50, 100]))

    def test_daily_ladder_resets_each_day(self):
        MilestoneTracker.objects.create(
            type="revenue",
            period=MilestoneTracker.Period.DAILY,
            last_milestone=Decimal("500000"),
            period_start=timezone.now() - timedelta(days=2),
        )
        reached = MilestoneService.check(
            "revenue", MilestoneTracker.Period.DAILY, Decimal("150000"), DAILY_REVENUE_MILESTONES
        )
        self.assertEqual(reached, 100000)
        notification = AdminNotification.objects.get(type=AdminNotification.Type.MILESTONE_REVENUE)
        self.assertEqual(notification.title, "Revenue Milestone (daily)")
