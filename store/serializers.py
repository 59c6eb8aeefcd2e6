from django.db import transaction
from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from .models import (
    Category, Tag, Product, ProductImage, ProductSpec, ProductVariation,
    PCType, PrebuiltPC, PrebuiltPCComponent, Favourite, Review,
)

SEO_FIELDS = [
    'seo_title', 'seo_description', 'seo_keywords', 'canonical_url',
    'robots_index', 'robots_follow', 'og_title', 'og_description', 'og_image',
    'twitter_title', 'twitter_description', 'twitter_image', 'json_ld', 'seo_score',
]


# ---------------------------
# Category Serializers
# ---------------------------
class CategorySerializer(serializers.ModelSerializer):
    product_count = serializers.SerializerMethodField()
    parent_name = serializers.CharField(source='parent.name', read_only=True, default=None)
    slug = serializers.SlugField(
        required=False,
        max_length=255,
        validators=[UniqueValidator(
            queryset=Category.objects.all(),
            message='A category with this slug already exists',
        )],
    )

    class Meta:
        model = Category
        fields = [
            'id', 'name', 'slug', 'description', 'parent', 'parent_name', 'image_url',
            'display_order', 'is_visible', 'is_featured', 'product_count',
            'created_at', 'updated_at',
        ] + SEO_FIELDS
        read_only_fields = ['seo_score', 'created_at', 'updated_at']

    def get_product_count(self, obj):
        count = getattr(obj, 'product_count', None)
        return obj.products.count() if count is None else count

    def validate(self, attrs):
        parent = attrs.get('parent')
        if self.instance and parent and parent.pk == self.instance.pk:
            raise serializers.ValidationError({'parent': 'Category cannot be its own parent'})
        if self.instance and parent and parent.pk in self.instance.descendant_ids():
            raise serializers.ValidationError({'parent': 'Category cannot be moved under its own subcategory'})
        return attrs


class CategoryBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'name', 'slug']


class TagSerializer(serializers.ModelSerializer):
    class Meta:
        model = Tag
        fields = ['id', 'name', 'slug']
        read_only_fields = ['slug']


# ---------------------------
# Product Serializers
# ---------------------------
class ProductImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductImage
        fields = ['id', 'url', 'alt_text', 'is_primary', 'sort_order']


class ProductSpecSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductSpec
        fields = ['id', 'key', 'value', 'sort_order']


class ProductVariationSerializer(serializers.ModelSerializer):
    effective_price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = ProductVariation
        fields = ['id', 'type', 'name', 'sku', 'price', 'effective_price', 'stock_quantity', 'is_active']
        extra_kwargs = {'sku': {'validators': []}}


class ProductListSerializer(serializers.ModelSerializer):
    category = CategoryBriefSerializer(source='primary_category', read_only=True)
    image = serializers.SerializerMethodField()
    discount_percentage = serializers.IntegerField(read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'slug', 'sku', 'brand', 'short_description',
            'price', 'compare_at_price', 'discount_price', 'discount_percentage',
            'stock_quantity', 'is_in_stock', 'is_featured', 'status', 'visibility',
            'rating_avg', 'rating_count', 'image', 'category', 'seo_score', 'created_at',
        ]

    def get_image(self, obj):
        image = obj.primary_image
        return image.url if image else None


class ProductDetailSerializer(ProductListSerializer):
    images = ProductImageSerializer(many=True, read_only=True)
    specs = ProductSpecSerializer(many=True, read_only=True)
    variations = serializers.SerializerMethodField()
    tags = TagSerializer(many=True, read_only=True)

    class Meta(ProductListSerializer.Meta):
        fields = ProductListSerializer.Meta.fields + [
            'description', 'images', 'specs', 'variations', 'tags', 'updated_at',
        ] + SEO_FIELDS

    def get_variations(self, obj):
        return ProductVariationSerializer(obj.variations.filter(is_active=True), many=True).data


def _sync_tags(instance, tag_names):
    tags = []
    for name in tag_names:
        name = name.strip()
        if name:
            tag, _ = Tag.objects.get_or_create(name=name)
            tags.append(tag)
    instance.tags.set(tags)


class ProductWriteSerializer(serializers.ModelSerializer):
    """Admin create/update. Nested lists replace the existing rows when present."""
    primary_category_id = serializers.PrimaryKeyRelatedField(
        source='primary_category', queryset=Category.objects.all(),
        error_messages={'required': 'Primary category is required', 'does_not_exist': 'Category not found'},
    )
    slug = serializers.SlugField(
        required=False,
        max_length=255,
        validators=[UniqueValidator(queryset=Product.objects.all(), message='A product with this slug already exists')],
    )
    sku = serializers.CharField(
        max_length=100,
        required=False,
        allow_null=True,
        allow_blank=True,
        validators=[UniqueValidator(queryset=Product.objects.all(), message='A product with this SKU already exists')],
    )
    images = ProductImageSerializer(many=True, required=False)
    specs = ProductSpecSerializer(many=True, required=False)
    variations = ProductVariationSerializer(many=True, required=False)
    tags = serializers.ListField(child=serializers.CharField(max_length=100), required=False)

    class Meta:
        model = Product
        fields = [
            'name', 'slug', 'sku', 'brand', 'short_description', 'description',
            'price', 'compare_at_price', 'discount_price', 'stock_quantity', 'is_in_stock',
            'status', 'visibility', 'is_featured', 'primary_category_id',
            'images', 'specs', 'variations', 'tags',
        ] + [f for f in SEO_FIELDS if f != 'seo_score']
        extra_kwargs = {
            'name': {'error_messages': {'required': 'Name is required'}},
            'price': {'error_messages': {'required': 'Price is required'}},
        }

    def validate_sku(self, value):
        return value or None

    NESTED = (
        ('images', ProductImage),
        ('specs', ProductSpec),
        ('variations', ProductVariation),
    )

    @transaction.atomic
    def create(self, validated_data):
        nested = {key: validated_data.pop(key, None) for key, _ in self.NESTED}
        tag_names = validated_data.pop('tags', None)
        product = Product.objects.create(**validated_data)
        self._write_nested(product, nested, tag_names)
        return product

    @transaction.atomic
    def update(self, instance, validated_data):
        nested = {key: validated_data.pop(key, None) for key, _ in self.NESTED}
        tag_names = validated_data.pop('tags', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()
        self._write_nested(instance, nested, tag_names)
        return instance

    def _write_nested(self, product, nested, tag_names):
        for key, model in self.NESTED:
            rows = nested.get(key)
            if rows is None:
                continue
            model.objects.filter(product=product).delete()
            for row in rows:
                model.objects.create(product=product, **row)
        if tag_names is not None:
            _sync_tags(product, tag_names)
        # Score depends on the image rows just written.
        product.save(update_fields=['seo_score', 'updated_at'])


# ---------------------------
# Prebuilt PC Serializers
# ---------------------------
class PCTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = PCType
        fields = ['id', 'name', 'slug', 'description', 'sort_order']
        read_only_fields = ['slug']


class PrebuiltPCComponentSerializer(serializers.ModelSerializer):
    product_id = serializers.PrimaryKeyRelatedField(source='product', queryset=Product.objects.all())
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_slug = serializers.CharField(source='product.slug', read_only=True)
    product_price = serializers.DecimalField(source='product.price', max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = PrebuiltPCComponent
        fields = ['id', 'product_id', 'product_name', 'product_slug', 'product_price',
                  'component_type', 'quantity', 'sort_order']


class PrebuiltPCListSerializer(serializers.ModelSerializer):
    pc_type = PCTypeSerializer(read_only=True)
    discount_percentage = serializers.IntegerField(read_only=True)

    class Meta:
        model = PrebuiltPC
        fields = [
            'id', 'name', 'slug', 'pc_type', 'short_description', 'total_price', 'selling_price',
            'compare_at_price', 'discount_percentage', 'primary_image', 'status', 'visibility',
            'is_featured', 'is_in_stock', 'rating_avg', 'rating_count', 'seo_score', 'created_at',
        ]


class PrebuiltPCDetailSerializer(PrebuiltPCListSerializer):
    components = PrebuiltPCComponentSerializer(many=True, read_only=True)
    tags = TagSerializer(many=True, read_only=True)

    class Meta(PrebuiltPCListSerializer.Meta):
        fields = PrebuiltPCListSerializer.Meta.fields + [
            'description', 'specifications', 'primary_image_alt', 'gallery_images',
            'components', 'tags', 'updated_at',
        ] + SEO_FIELDS


class PrebuiltPCWriteSerializer(serializers.ModelSerializer):
    pc_type_id = serializers.PrimaryKeyRelatedField(
        source='pc_type', queryset=PCType.objects.all(), required=False, allow_null=True
    )
    slug = serializers.SlugField(
        required=False,
        max_length=255,
        validators=[UniqueValidator(queryset=PrebuiltPC.objects.all(), message='A prebuilt PC with this slug already exists')],
    )
    components = PrebuiltPCComponentSerializer(many=True, required=False)
    tags = serializers.ListField(child=serializers.CharField(max_length=100), required=False)

    class Meta:
        model = PrebuiltPC
        fields = [
            'name', 'slug', 'pc_type_id', 'short_description', 'description', 'specifications',
            'selling_price', 'compare_at_price', 'primary_image', 'primary_image_alt', 'gallery_images',
            'status', 'visibility', 'is_featured', 'is_in_stock', 'components', 'tags',
        ] + [f for f in SEO_FIELDS if f != 'seo_score']

    @transaction.atomic
    def create(self, validated_data):
        components = validated_data.pop('components', None)
        tag_names = validated_data.pop('tags', None)
        pc = PrebuiltPC.objects.create(**validated_data)
        self._write_nested(pc, components, tag_names)
        return pc

    @transaction.atomic
    def update(self, instance, validated_data):
        components = validated_data.pop('components', None)
        tag_names = validated_data.pop('tags', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()
        self._write_nested(instance, components, tag_names)
        return instance

    def _write_nested(self, pc, components, tag_names):
        if components is not None:
            pc.components.all().delete()
            for row in components:
                PrebuiltPCComponent.objects.create(prebuilt_pc=pc, **row)
            pc.recalculate_total_price()
        if tag_names is not None:
            _sync_tags(pc, tag_names)


# ---------------------------
# Review & Favourite Serializers
# ---------------------------
class ReviewSerializer(serializers.ModelSerializer):
    user_name = serializers.SerializerMethodField()

    class Meta:
        model = Review
        fields = [
            'id', 'product', 'prebuilt_pc', 'user_name', 'rating', 'title', 'description',
            'images', 'is_approved', 'is_verified', 'helpful_count', 'created_at',
        ]

    def get_user_name(self, obj):
        return obj.user.full_name or obj.user.email.split('@')[0]


class ReviewCreateSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(required=False, allow_null=True)
    prebuilt_pc_id = serializers.IntegerField(required=False, allow_null=True)
    title = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    rating = serializers.IntegerField(required=False, allow_null=True)
    images = serializers.ListField(child=serializers.URLField(max_length=500), required=False)

    def validate(self, attrs):
        if not attrs.get('title') or not attrs.get('description') or attrs.get('rating') is None:
            raise serializers.ValidationError('Title, description, and rating are required')
        if not 1 <= attrs['rating'] <= 5:
            raise serializers.ValidationError('Rating must be between 1 and 5')
        if not attrs.get('product_id') and not attrs.get('prebuilt_pc_id'):
            raise serializers.ValidationError('Product ID or Prebuilt PC ID is required')
        attrs['images'] = attrs.get('images', [])[:Review.MAX_IMAGES]
        return attrs


class AdminReviewSerializer(ReviewSerializer):
    user_email = serializers.CharField(source='user.email', read_only=True)
    target_name = serializers.SerializerMethodField()

    class Meta(ReviewSerializer.Meta):
        fields = ReviewSerializer.Meta.fields + ['user_email', 'target_name']

    def get_target_name(self, obj):
        return str(obj.target)


class FavouriteSerializer(serializers.ModelSerializer):
    product = ProductListSerializer(read_only=True)

    class Meta:
        model = Favourite
        fields = ['id', 'product', 'added_at']
