from django.urls import path
from .views import BlogListView, BlogDetailView, HeroBannerListView, InquiryCreateView

urlpatterns = [
    # Blog
    path('blogs/', BlogListView.as_view(), name='blog-list'),
    path('blogs/<slug:slug>/', BlogDetailView.as_view(), name='blog-detail'),

    path('hero-banners/', HeroBannerListView.as_view(), name='hero-banners'),
    path('inquiries/', InquiryCreateView.as_view(), name='inquiry-create'),
]
