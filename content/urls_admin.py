from django.urls import path
from .views_admin import (
    AdminBlogCategoryListCreateView, AdminBlogCategoryDetailView,
    AdminBlogListCreateView, AdminBlogDetailView,
    AdminHeroBannerListCreateView, AdminHeroBannerDetailView,
    AdminInquiryListCreateView, AdminInquiryDetailView,
    AdminMarketingEmailView,
)

urlpatterns = [
    path('blog-categories/', AdminBlogCategoryListCreateView.as_view(), name='admin-blog-categories'),
    path('blog-categories/<int:pk>/', AdminBlogCategoryDetailView.as_view(), name='admin-blog-category-detail'),

    path('blogs/', AdminBlogListCreateView.as_view(), name='admin-blogs'),
    path('blogs/<int:pk>/', AdminBlogDetailView.as_view(), name='admin-blog-detail'),

    path('hero-banners/', AdminHeroBannerListCreateView.as_view(), name='admin-hero-banners'),
    path('hero-banners/<int:pk>/', AdminHeroBannerDetailView.as_view(), name='admin-hero-banner-detail'),

    path('inquiries/', AdminInquiryListCreateView.as_view(), name='admin-inquiries'),
    path('inquiries/<int:pk>/', AdminInquiryDetailView.as_view(), name='admin-inquiry-detail'),

    path('marketing/email/', AdminMarketingEmailView.as_view(), name='admin-marketing-email'),
]
