from rest_framework import serializers

from .models import PageSEO


class SettingsUpdateSerializer(serializers.Serializer):
    settings = serializers.DictField(
        child=serializers.CharField(allow_blank=True, allow_null=True),
        error_messages={'required': 'Invalid settings data', 'not_a_dict': 'Invalid settings data'},
    )


class UploadSerializer(serializers.Serializer):
    MAX_FILE_SIZE = 2 * 1024 * 1024
    ALLOWED_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/svg+xml", "image/webp")

    file = serializers.FileField(error_messages={'required': 'No file provided'})
    folder = serializers.CharField(required=False, default='products', max_length=100)

    def validate_file(self, value):
        if getattr(value, 'content_type', None) not in self.ALLOWED_TYPES:
            raise serializers.ValidationError("Invalid file type. Only JPG, PNG, SVG, and WebP are allowed.")
        if value.size > self.MAX_FILE_SIZE:
            raise serializers.ValidationError("File too large. Maximum size is 2MB.")
        return value

    def validate_folder(self, value):
        return value.strip().strip('/') or 'products'


class PageSEOSerializer(serializers.ModelSerializer):
    issues = serializers.ListField(child=serializers.CharField(), read_only=True)

    class Meta:
        model = PageSEO
        fields = [
            'id', 'page_path', 'page_name',
            'seo_title', 'seo_description', 'seo_keywords', 'canonical_url',
            'robots_index', 'robots_follow', 'og_title', 'og_description', 'og_image',
            'twitter_title', 'twitter_description', 'json_ld',
            'seo_score', 'issues', 'updated_at',
        ]
        read_only_fields = ['id', 'seo_score', 'issues', 'updated_at']
        extra_kwargs = {'page_path': {'validators': []}}

    def validate_page_path(self, value):
        value = value.strip()
        if not value.startswith('/'):
            value = f"/{value}"
        return value
