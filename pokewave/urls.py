from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include("PW_battle.urls")),  # API lives under /api/ inside PW_battle.urls
]
