import logging

import requests
from django.conf import settings
from django.core.cache import cache

from configuration.services import SettingsService

logger = logging.getLogger(__name__)

TOKEN_CACHE_KEY = "shiprocket:auth_token"
# Tokens are valid for 10 days
TOKEN_TTL = 9 * 24 * 60 * 60


class ShiprocketError(Exception):
    pass


def _delivery_days(courier):
    try:
        return int(courier.get("estimated_delivery_days"))
    except (TypeError, ValueError):
        return 999


class Shiprocket:
    """Shipping-rate lookups against the Shiprocket external API."""
    base_url = getattr(settings, "SHIPROCKET_BASE_URL", "https://apiv2.shiprocket.in/v1/external")

    def __init__(self, config=None):
        config = config or SettingsService.get_shiprocket_config()
        self.email = config["email"]
        self.password = config["password"]
        self.pickup_pincode = config["pickup_pincode"]

    def get_token(self):
        token = cache.get(TOKEN_CACHE_KEY)
        if token:
            return token

        resp = requests.post(f"{self.base_url}/auth/login",
                             json={"email": self.email, "password": self.password}, timeout=10)
        resp.raise_for_status()
        token = resp.json().get("token")
        if not token:
            raise ShiprocketError("Failed to get Shiprocket token")
        cache.set(TOKEN_CACHE_KEY, token, TOKEN_TTL)
        logger.info("Shiprocket auth token refreshed")
        return token

    def _get(self, path, params=None):
        headers = {
            "Authorization": f"Bearer {self.get_token()}",
            "Content-Type": "application/json",
        }
        resp = requests.get(f"{self.base_url}{path}", params=params, headers=headers, timeout=10)
        resp.raise_for_status()
        return resp.json()

    def check_pincode(self, pincode):
        """Postcode details when the pincode is serviceable, else None."""
        result = self._get("/open/postcode/details", params={"postcode": pincode})
        if result.get("success"):
            return result.get("postcode_details")
        return None

    def get_couriers(self, delivery_pincode, weight, cod=False):
        result = self._get("/courier/serviceability/", params={
            "pickup_postcode": self.pickup_pincode,
            "delivery_postcode": delivery_pincode,
            "weight": weight,
            "cod": 1 if cod else 0,
        })
        return (result.get("data") or {}).get("available_courier_companies") or []

    @staticmethod
    def courier_option(courier):
        return {
            "courier_id": courier.get("courier_company_id"),
            "courier_name": courier.get("courier_name"),
            "charge": courier.get("freight_charge"),
            "cod_charges": courier.get("cod_charges") or 0,
            "estimated_days": courier.get("estimated_delivery_days"),
        }

    def rate_options(self, delivery_pincode, weight, cod=False):
        """``(cheapest, fastest)`` courier options, or ``(None, None)`` when none serve the route."""
        couriers = self.get_couriers(delivery_pincode, weight, cod)
        if not couriers:
            return None, None
        cheapest = min(couriers, key=lambda c: c.get("freight_charge") or 0)
        fastest = min(couriers, key=_delivery_days)
        return self.courier_option(cheapest), self.courier_option(fastest)
