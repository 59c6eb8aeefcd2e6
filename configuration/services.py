import logging

from django.conf import settings
from django.core.cache import cache

from .models import SiteSetting
from .registry import SETTING_GROUPS, find_field

logger = logging.getLogger(__name__)

CACHE_KEY = "site_settings:all"
CACHE_TIMEOUT = 60


def _as_bool(value):
    return str(value).strip().lower() in ("true", "1", "yes", "on")


class SettingsService:
    """
    Read and write ``SiteSetting`` rows.

    Stored values win over the environment; registry defaults fill the gaps.
    Reads are cached briefly and the cache is dropped on every write.
    """

    @staticmethod
    def all():
        values = cache.get(CACHE_KEY)
        if values is None:
            values = dict(SiteSetting.objects.values_list("key", "value"))
            cache.set(CACHE_KEY, values, CACHE_TIMEOUT)
        return values

    @staticmethod
    def get(key, default=None):
        value = SettingsService.all().get(key)
        if value not in (None, ""):
            return value
        if default is not None:
            return default
        _, field = find_field(key)
        return field.get("default") if field else None

    @staticmethod
    def get_bool(key, default=False):
        value = SettingsService.get(key)
        if value is None:
            return default
        return _as_bool(value)

    @staticmethod
    def grouped():
        """Registry groups with the current value of every field."""
        stored = SettingsService.all()
        groups = []
        for group_key, group in SETTING_GROUPS.items():
            groups.append({
                "key": group_key,
                "label": group["label"],
                "description": group["description"],
                "fields": [
                    {**field, "value": stored.get(field["key"]) or field.get("default", "")}
                    for field in group["fields"]
                ],
            })
        return groups, stored

    @staticmethod
    def update(values):
        """Upsert known keys. Returns the list of keys written."""
        written = []
        for key, value in values.items():
            group_key, field = find_field(key)
            if field is None:
                logger.warning(f"Unknown setting key: {key}")
                continue
            SiteSetting.objects.update_or_create(
                key=key,
                defaults={
                    "value": "" if value is None else str(value),
                    "group": group_key,
                    "label": field["label"],
                    "type": field["type"],
                },
            )
            written.append(key)
        cache.delete(CACHE_KEY)
        return written

    # =====================================================
    # Typed views used by gateways and mail
    # =====================================================

    @staticmethod
    def get_razorpay_keys():
        return {
            "key_id": SettingsService.get("razorpay_key_id", settings.RAZORPAY_KEY_ID or None) or "",
            "key_secret": SettingsService.get("razorpay_key_secret", settings.RAZORPAY_KEY_SECRET or None) or "",
        }

    @staticmethod
    def get_shiprocket_config():
        email = SettingsService.get("shiprocket_email", settings.SHIPROCKET_EMAIL or None) or ""
        password = SettingsService.get("shiprocket_password", settings.SHIPROCKET_PASSWORD or None) or ""
        return {
            "enabled": SettingsService.get_bool("shiprocket_enabled") or bool(email and password),
            "email": email,
            "password": password,
            "pickup_pincode": SettingsService.get("shiprocket_pickup_pincode", settings.SHIPROCKET_PICKUP_PINCODE),
        }

    @staticmethod
    def get_smtp_config():
        """SMTP credentials from the ``smtp`` group, or None when the group is disabled or incomplete."""
        if not SettingsService.get_bool("smtp_enabled"):
            return None
        host = SettingsService.get("smtp_host")
        if not host:
            return None
        from_email = SettingsService.get("smtp_from_email") or settings.DEFAULT_FROM_EMAIL
        from_name = SettingsService.get("smtp_from_name")
        try:
            port = int(SettingsService.get("smtp_port") or settings.EMAIL_PORT)
        except (TypeError, ValueError):
            port = settings.EMAIL_PORT
        return {
            "host": host,
            "port": port,
            "username": SettingsService.get("smtp_user") or "",
            "password": SettingsService.get("smtp_password") or "",
            "use_tls": port != 465,
            "use_ssl": port == 465,
            "from_email": f"{from_name} <{from_email}>" if from_name else from_email,
        }

    @staticmethod
    def from_email():
        smtp_config = SettingsService.get_smtp_config()
        return smtp_config["from_email"] if smtp_config else settings.DEFAULT_FROM_EMAIL

    @staticmethod
    def get_seasonal():
        theme = SettingsService.get("seasonal_theme", "winter")
        if theme == "none":
            return {"enabled": False, "theme": "none"}
        return {
            "enabled": True,
            "theme": theme,
            "snow_enabled": SettingsService.get_bool("seasonal_snow_enabled", True),
            "santa_enabled": SettingsService.get_bool("seasonal_santa_enabled", True),
            "header_decoration": SettingsService.get_bool("seasonal_header_decoration", True),
            "intensity": SettingsService.get("seasonal_intensity", "medium"),
        }
