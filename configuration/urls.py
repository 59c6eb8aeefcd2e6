from django.urls import path
from .views import SeasonalSettingsView

urlpatterns = [
    path('seasonal/', SeasonalSettingsView.as_view(), name='seasonal-settings'),
]
