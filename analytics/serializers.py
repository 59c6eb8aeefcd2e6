from rest_framework import serializers

from .models import PageView


class PageViewCreateSerializer(serializers.ModelSerializer):
    class Meta:
        model = PageView
        fields = [
            'session_id', 'visitor_id', 'page_path', 'page_title', 'page_type', 'reference_id',
            'reference_name', 'referrer', 'utm_source', 'utm_medium', 'utm_campaign', 'utm_term',
            'utm_content', 'device_type', 'browser', 'os', 'screen_width', 'screen_height',
        ]
        extra_kwargs = {
            'device_type': {'error_messages': {'invalid_choice': 'Invalid device type'}},
        }


class PageViewEngagementSerializer(serializers.Serializer):
    view_id = serializers.IntegerField(error_messages={'required': 'view_id is required'})
    dwell_time = serializers.IntegerField(min_value=0, required=False)
    scroll_depth = serializers.IntegerField(min_value=0, max_value=100, required=False)
    interactions = serializers.IntegerField(min_value=0, required=False)
    is_bounce = serializers.BooleanField(required=False)
    is_exit = serializers.BooleanField(required=False)
