from django.contrib import admin
from .models import (
    Category, Tag, Product, ProductImage, ProductSpec, ProductVariation, PCType, PrebuiltPC,
    PrebuiltPCComponent, Cart, CartItem, Favourite, Review,
)


SEO_FIELDSET = ('SEO', {
    'fields': (
        'seo_title', 'seo_description', 'seo_keywords', 'canonical_url', 'robots_index', 'robots_follow',
        'og_title', 'og_description', 'og_image', 'twitter_title', 'twitter_description', 'twitter_image',
        'json_ld', 'seo_score',
    ),
    'classes': ('collapse',)
})


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'parent', 'display_order', 'is_visible', 'is_featured', 'seo_score')
    list_filter = ('is_visible', 'is_featured')
    search_fields = ('name', 'slug')
    prepopulated_fields = {'slug': ('name',)}
    readonly_fields = ('seo_score', 'created_at', 'updated_at')


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ('name', 'slug', 'created_at')
    search_fields = ('name',)


class ProductImageInline(admin.TabularInline):
    model = ProductImage
    extra = 0


class ProductSpecInline(admin.TabularInline):
    model = ProductSpec
    extra = 0


class ProductVariationInline(admin.TabularInline):
    model = ProductVariation
    extra = 0


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('name', 'sku', 'primary_category', 'price', 'stock_quantity', 'is_in_stock', 'status', 'created_at')
    list_filter = ('status', 'visibility', 'is_featured', 'is_in_stock', 'primary_category')
    search_fields = ('name', 'sku', 'brand')
    prepopulated_fields = {'slug': ('name',)}
    readonly_fields = ('rating_avg', 'rating_count', 'seo_score', 'created_at', 'updated_at')
    filter_horizontal = ('tags',)
    inlines = [ProductImageInline, ProductSpecInline, ProductVariationInline]
    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'slug', 'sku', 'brand', 'primary_category', 'tags')
        }),
        ('Details', {
            'fields': ('short_description', 'description', 'price', 'compare_at_price', 'discount_price',
                       'stock_quantity', 'is_in_stock')
        }),
        ('Publishing', {
            'fields': ('status', 'visibility', 'is_featured', 'rating_avg', 'rating_count')
        }),
        SEO_FIELDSET,
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(PCType)
class PCTypeAdmin(admin.ModelAdmin):
    list_display = ('name', 'slug', 'sort_order')
    search_fields = ('name',)


class PrebuiltPCComponentInline(admin.TabularInline):
    model = PrebuiltPCComponent
    extra = 0
    raw_id_fields = ('product',)


@admin.register(PrebuiltPC)
class PrebuiltPCAdmin(admin.ModelAdmin):
    list_display = ('name', 'pc_type', 'selling_price', 'total_price', 'status', 'is_featured', 'is_in_stock')
    list_filter = ('status', 'visibility', 'pc_type', 'is_featured')
    search_fields = ('name', 'slug')
    prepopulated_fields = {'slug': ('name',)}
    readonly_fields = ('total_price', 'rating_avg', 'rating_count', 'seo_score', 'created_at', 'updated_at')
    inlines = [PrebuiltPCComponentInline]


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0
    raw_id_fields = ('product', 'variation', 'prebuilt_pc')


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = ('user', 'session_id', 'created_at', 'updated_at')
    list_filter = ('created_at',)
    search_fields = ('user__email', 'session_id')
    readonly_fields = ('created_at', 'updated_at')
    inlines = [CartItemInline]


@admin.register(Favourite)
class FavouriteAdmin(admin.ModelAdmin):
    list_display = ('customer', 'product', 'added_at')
    list_filter = ('added_at',)
    search_fields = ('customer__email', 'product__name')
    readonly_fields = ('added_at',)


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('target', 'user', 'rating', 'is_approved', 'is_verified', 'created_at')
    list_filter = ('rating', 'is_approved', 'is_verified', 'created_at')
    search_fields = ('product__name', 'prebuilt_pc__name', 'user__email')
    readonly_fields = ('helpful_count', 'created_at', 'updated_at')
