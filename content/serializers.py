from django.db import transaction
from rest_framework import serializers

from store.serializers import SEO_FIELDS
from .models import Blog, BlogCategory, BlogTag, HeroBanner, Inquiry, content_slug, unique_content_slug


# ---------------------------
# Blog
# ---------------------------
class BlogCategorySerializer(serializers.ModelSerializer):
    blog_count = serializers.SerializerMethodField()

    class Meta:
        model = BlogCategory
        fields = ['id', 'name', 'slug', 'description', 'color', 'sort_order', 'is_active',
                  'blog_count', 'created_at', 'updated_at']
        read_only_fields = ['slug', 'created_at', 'updated_at']
        extra_kwargs = {'name': {'error_messages': {'required': 'Category name is required',
                                                    'blank': 'Category name is required'}}}

    def get_blog_count(self, obj):
        count = getattr(obj, 'blog_count', None)
        return count if count is not None else obj.blogs.count()

    def create(self, validated_data):
        validated_data['slug'] = unique_content_slug(BlogCategory, validated_data['name'])
        return super().create(validated_data)

    def update(self, instance, validated_data):
        name = validated_data.get('name')
        if name and name != instance.name:
            validated_data['slug'] = unique_content_slug(BlogCategory, name, instance.pk)
        return super().update(instance, validated_data)


class BlogCategoryBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = BlogCategory
        fields = ['id', 'name', 'slug', 'color']


class BlogTagSerializer(serializers.ModelSerializer):
    class Meta:
        model = BlogTag
        fields = ['id', 'name', 'slug']


class BlogListSerializer(serializers.ModelSerializer):
    """Card shown on the public blog index"""
    category = BlogCategoryBriefSerializer(read_only=True)
    tags = BlogTagSerializer(many=True, read_only=True)

    class Meta:
        model = Blog
        fields = [
            'id', 'title', 'slug', 'excerpt', 'featured_image', 'featured_image_alt',
            'author_name', 'author_image', 'reading_time', 'view_count', 'published_at',
            'is_featured', 'category', 'tags',
        ]


class BlogDetailSerializer(BlogListSerializer):
    class Meta(BlogListSerializer.Meta):
        fields = BlogListSerializer.Meta.fields + [
            'content', 'author_bio', 'allow_comments', 'schema_type', 'updated_at',
        ] + [f for f in SEO_FIELDS if f != 'seo_score']


class AdminBlogSerializer(BlogListSerializer):
    class Meta(BlogListSerializer.Meta):
        fields = BlogListSerializer.Meta.fields + [
            'content', 'author_bio', 'status', 'allow_comments', 'schema_type', 'internal_notes',
            'scheduled_at', 'created_at', 'updated_at',
        ] + SEO_FIELDS


class BlogWriteSerializer(serializers.ModelSerializer):
    """Admin create/update. ``tags`` replaces the post's tags when sent."""
    slug = serializers.CharField(max_length=255, required=False, allow_blank=True)
    category_id = serializers.PrimaryKeyRelatedField(
        source='category', queryset=BlogCategory.objects.all(), required=False, allow_null=True,
        error_messages={'does_not_exist': 'Blog category not found'},
    )
    tags = serializers.ListField(child=serializers.CharField(max_length=100), required=False)

    class Meta:
        model = Blog
        fields = [
            'title', 'slug', 'excerpt', 'content', 'featured_image', 'featured_image_alt',
            'author_name', 'author_image', 'author_bio', 'category_id', 'tags', 'status',
            'is_featured', 'allow_comments', 'published_at', 'scheduled_at', 'schema_type',
            'internal_notes',
        ] + [f for f in SEO_FIELDS if f != 'seo_score']

    def validate_slug(self, value):
        slug = content_slug(value)
        if not slug:
            return None
        taken = Blog.objects.filter(slug=slug)
        if self.instance is not None:
            if slug == self.instance.slug:
                return slug
            taken = taken.exclude(pk=self.instance.pk)
            if taken.exists():
                raise serializers.ValidationError("Slug already exists")
        return slug

    @transaction.atomic
    def create(self, validated_data):
        tag_names = validated_data.pop('tags', [])
        custom_slug = validated_data.pop('slug', None)
        validated_data['slug'] = unique_content_slug(Blog, custom_slug or validated_data['title'])
        blog = Blog.objects.create(**validated_data)
        if tag_names:
            blog.set_tags(tag_names)
        return blog

    @transaction.atomic
    def update(self, instance, validated_data):
        tag_names = validated_data.pop('tags', None)
        custom_slug = validated_data.pop('slug', None)
        title = validated_data.get('title')
        if custom_slug:
            instance.slug = custom_slug
        elif title and title != instance.title:
            instance.slug = unique_content_slug(Blog, title, instance.pk)

        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()
        if tag_names is not None:
            instance.set_tags(tag_names)
        return instance


# ---------------------------
# Hero banners
# ---------------------------
class HeroBannerSerializer(serializers.ModelSerializer):
    class Meta:
        model = HeroBanner
        fields = [
            'id', 'location', 'title', 'subtitle', 'description', 'image_url', 'mobile_image_url',
            'button_text', 'button_link', 'text_color', 'overlay_color', 'text_align',
            'badge_text', 'badge_color', 'start_date', 'end_date', 'is_active', 'sort_order',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError("End date must be after start date")
        return attrs


# ---------------------------
# Inquiries
# ---------------------------
class InquiryCreateSerializer(serializers.ModelSerializer):
    type = serializers.ChoiceField(
        choices=Inquiry.Type.choices, required=False, default=Inquiry.Type.MANUAL,
        error_messages={'invalid_choice': 'Invalid inquiry type'},
    )
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)

    class Meta:
        model = Inquiry
        fields = [
            'type', 'name', 'mobile', 'email', 'requirement', 'budget', 'source',
            'utm_source', 'utm_medium', 'utm_campaign',
        ]

    def validate_email(self, value):
        return value or None


class InquirySerializer(serializers.ModelSerializer):
    class Meta:
        model = Inquiry
        fields = [
            'id', 'type', 'name', 'mobile', 'email', 'requirement', 'budget', 'note', 'status',
            'source', 'utm_source', 'utm_medium', 'utm_campaign', 'follow_up_date',
            'last_contacted_at', 'assigned_to', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'utm_source', 'utm_medium', 'utm_campaign', 'created_at', 'updated_at']
        extra_kwargs = {
            'type': {'error_messages': {'invalid_choice': 'Invalid inquiry type'}},
            'status': {'error_messages': {'invalid_choice': 'Invalid inquiry status'}},
        }


# ---------------------------
# Marketing
# ---------------------------
class MarketingEmailSerializer(serializers.Serializer):
    RECIPIENT_TYPES = ('inquiries', 'customers', 'all_users')

    recipient_type = serializers.ChoiceField(choices=RECIPIENT_TYPES, default='inquiries')
    selected_ids = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)
    subject = serializers.CharField(required=False, allow_blank=True)
    content = serializers.CharField(required=False, allow_blank=True)
    button_text = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    button_url = serializers.URLField(required=False, allow_blank=True, allow_null=True)

    def validate(self, attrs):
        if not (attrs.get('subject') or '').strip() or not (attrs.get('content') or '').strip():
            raise serializers.ValidationError("Subject and content are required")
        return attrs
