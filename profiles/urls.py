from django.urls import path

from .views import PreferencesViewSet, ProfileViewSet

urlpatterns = [
    path("users/me", ProfileViewSet.as_view({"get": "me", "patch": "partial_update_me"}), name="users-me"),
    path("users/<str:username>", ProfileViewSet.as_view({"get": "retrieve"}), name="users-detail"),
    path("settings", PreferencesViewSet.as_view({"get": "retrieve", "put": "update"}), name="settings"),
]
