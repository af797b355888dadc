from django.urls import path

from .views import SearchViewSet

urlpatterns = [
    path("search", SearchViewSet.as_view({"get": "list"}), name="search"),
    path("search/trending", SearchViewSet.as_view({"get": "trending"}), name="search-trending"),
    path("search/tags", SearchViewSet.as_view({"get": "tags"}), name="search-tags"),
]
