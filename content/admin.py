from django.contrib import admin
from .models import Blog, BlogCategory, BlogTag, HeroBanner, Inquiry


class BlogTagInline(admin.TabularInline):
    model = BlogTag
    extra = 0


@admin.register(BlogCategory)
class BlogCategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'slug', 'sort_order', 'is_active')
    search_fields = ('name', 'slug')


@admin.register(Blog)
class BlogAdmin(admin.ModelAdmin):
    list_display = ('title', 'status', 'category', 'is_featured', 'view_count', 'seo_score', 'published_at')
    search_fields = ('title', 'slug', 'author_name')
    list_filter = ('status', 'is_featured', 'category')
    readonly_fields = ('reading_time', 'view_count', 'seo_score', 'created_at', 'updated_at')
    inlines = [BlogTagInline]


@admin.register(HeroBanner)
class HeroBannerAdmin(admin.ModelAdmin):
    list_display = ('title', 'location', 'is_active', 'sort_order', 'start_date', 'end_date')
    list_filter = ('location', 'is_active')


@admin.register(Inquiry)
class InquiryAdmin(admin.ModelAdmin):
    list_display = ('name', 'mobile', 'type', 'status', 'assigned_to', 'created_at')
    search_fields = ('name', 'mobile', 'email', 'requirement')
    list_filter = ('type', 'status', 'created_at')
