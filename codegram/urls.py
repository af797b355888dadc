"""
URL configuration for codegram project.

모든 REST 엔드포인트는 /api/v1/ 아래에 둔다. 헬스체크는 /health.
"""

from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView, SpectacularRedocView

from core.views import HealthView


urlpatterns = [
    path("admin/", admin.site.urls),
    path("health", HealthView.as_view(), name="health"),
    path("api/v1/", include("core.urls")),
    path("api/v1/", include("profiles.urls")),
    path("api/v1/", include("contents.urls")),
    path("api/v1/", include("comments.urls")),
    path("api/v1/", include("engagements.urls")),
    path("api/v1/", include("relations.urls")),
    path("api/v1/", include("moderation.urls")),
    path("api/v1/", include("notifications.urls")),
    path("api/v1/", include("feed.urls")),
    path("api/v1/", include("search.urls")),
    path("api/v1/", include("realtime.urls")),
    # OpenAPI schema & docs
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("api/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
]
