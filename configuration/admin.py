from django.contrib import admin
from .models import SiteSetting, PageSEO


@admin.register(SiteSetting)
class SiteSettingAdmin(admin.ModelAdmin):
    list_display = ('key', 'group', 'type', 'updated_at')
    list_filter = ('group',)
    search_fields = ('key', 'label')


@admin.register(PageSEO)
class PageSEOAdmin(admin.ModelAdmin):
    list_display = ('page_path', 'page_name', 'seo_score', 'robots_index', 'updated_at')
    search_fields = ('page_path', 'page_name', 'seo_title')
    readonly_fields = ('seo_score', 'updated_at')
