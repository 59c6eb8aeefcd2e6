import hashlib
import hmac
from decimal import Decimal, ROUND_HALF_UP

import requests
from django.conf import settings

from configuration.services import SettingsService


def to_paise(amount):
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class Razorpay:
    """Thin client over the Razorpay Orders, Payments and Refunds REST API."""
    base_url = getattr(settings, "RAZORPAY_BASE_URL", "https://api.razorpay.com/v1")

    def __init__(self):
        keys = SettingsService.get_razorpay_keys()
        self.key_id = keys["key_id"]
        self.key_secret = keys["key_secret"]
        self.auth = (self.key_id, self.key_secret)
        self.headers = {"Content-Type": "application/json"}

    def create_order(self, amount, receipt, currency="INR", notes=None):
        payload = {
            "amount": to_paise(amount),
            "currency": currency,
            "receipt": receipt,
            "notes": notes or {},
        }
        resp = requests.post(f"{self.base_url}/orders", json=payload,
                             auth=self.auth, headers=self.headers, timeout=10)
        resp.raise_for_status()
        return resp.json()

    def verify_signature(self, order_id, payment_id, signature):
        body = f"{order_id}|{payment_id}"
        expected = hmac.new(self.key_secret.encode(), body.encode(), hashlib.sha256).hexdigest()
        return hmac.compare_digest(expected, signature or "")

    def fetch_payment(self, payment_id):
        resp = requests.get(f"{self.base_url}/payments/{payment_id}",
                            auth=self.auth, headers=self.headers, timeout=10)
        resp.raise_for_status()
        return resp.json()

    def refund(self, payment_id, amount=None, notes=None):
        """Full refund, or a partial one when ``amount`` (in rupees) is given."""
        payload = {"notes": notes or {}}
        if amount:
            payload["amount"] = to_paise(amount)
        resp = requests.post(f"{self.base_url}/payments/{payment_id}/refund", json=payload,
                             auth=self.auth, headers=self.headers, timeout=10)
        resp.raise_for_status()
        return resp.json()
