# =====================================================
# Setting groups shown on the admin settings screen
# =====================================================
# Each field may carry a ``default`` used when no row is stored.

SETTING_GROUPS = {
    "razorpay": {
        "label": "Razorpay Payment Gateway",
        "description": "Configure Razorpay API credentials for payment processing",
        "fields": [
            {"key": "razorpay_key_id", "label": "Key ID", "type": "text", "placeholder": "rzp_live_xxxxx"},
            {"key": "razorpay_key_secret", "label": "Key Secret", "type": "password", "placeholder": "Enter secret key"},
            {"key": "razorpay_webhook_secret", "label": "Webhook Secret", "type": "password", "placeholder": "Enter webhook secret"},
            {"key": "razorpay_enabled", "label": "Enable Razorpay", "type": "boolean", "default": "false"},
        ],
    },
    "shiprocket": {
        "label": "Shiprocket Shipping",
        "description": "Configure Shiprocket API for shipping and logistics",
        "fields": [
            {"key": "shiprocket_email", "label": "Email", "type": "email", "placeholder": "your@email.com"},
            {"key": "shiprocket_password", "label": "Password", "type": "password", "placeholder": "Enter password"},
            {"key": "shiprocket_pickup_location", "label": "Pickup Location ID", "type": "text", "placeholder": "e.g., Primary"},
            {"key": "shiprocket_pickup_pincode", "label": "Pickup Pincode", "type": "text", "placeholder": "110001"},
            {"key": "shiprocket_enabled", "label": "Enable Shiprocket", "type": "boolean", "default": "false"},
        ],
    },
    "smtp": {
        "label": "Email / SMTP Settings",
        "description": "Configure email settings for order notifications and alerts",
        "fields": [
            {"key": "smtp_host", "label": "SMTP Host", "type": "text", "placeholder": "smtp.gmail.com"},
            {"key": "smtp_port", "label": "SMTP Port", "type": "number", "placeholder": "587"},
            {"key": "smtp_user", "label": "SMTP Username", "type": "email", "placeholder": "your@gmail.com"},
            {"key": "smtp_password", "label": "SMTP Password / App Password", "type": "password", "placeholder": "Enter app password"},
            {"key": "smtp_from_email", "label": "From Email", "type": "email", "placeholder": "noreply@yourstore.com"},
            {"key": "smtp_from_name", "label": "From Name", "type": "text", "placeholder": "Sai Computers"},
            {"key": "smtp_enabled", "label": "Enable Email Notifications", "type": "boolean", "default": "false"},
        ],
    },
    "store": {
        "label": "Store Settings",
        "description": "General store configuration",
        "fields": [
            {"key": "store_name", "label": "Store Name", "type": "text", "placeholder": "Sai Computers"},
            {"key": "store_phone", "label": "Store Phone", "type": "text", "placeholder": "+91 98765 43210"},
            {"key": "store_email", "label": "Store Email", "type": "email", "placeholder": "contact@store.com"},
            {"key": "store_address", "label": "Store Address", "type": "text", "placeholder": "Full address"},
            {"key": "store_gst", "label": "GST Number", "type": "text", "placeholder": "GSTIN"},
        ],
    },
    "seasonal": {
        "label": "Seasonal Theme",
        "description": "Configure seasonal decorations and effects for your website",
        "fields": [
            {"key": "seasonal_theme", "label": "Current Season", "type": "select",
             "options": ["none", "winter", "summer", "diwali", "holi"], "default": "none"},
            {"key": "seasonal_snow_enabled", "label": "Enable Snowfall Effect", "type": "boolean", "default": "true"},
            {"key": "seasonal_santa_enabled", "label": "Enable Flying Santa", "type": "boolean", "default": "true"},
            {"key": "seasonal_header_decoration", "label": "Enable Header Snow Decoration", "type": "boolean", "default": "true"},
            {"key": "seasonal_intensity", "label": "Effect Intensity", "type": "select",
             "options": ["low", "medium", "high"], "default": "medium"},
        ],
    },
}


def find_field(key):
    """Return ``(group_key, field)`` for a setting key, or ``(None, None)``."""
    for group_key, group in SETTING_GROUPS.items():
        for field in group["fields"]:
            if field["key"] == key:
                return group_key, field
    return None, None
