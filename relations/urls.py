from django.urls import path

from .views import FollowViewSet

urlpatterns = [
    path("follows/suggestions", FollowViewSet.as_view({"get": "suggestions"}), name="follow-suggestions"),
    path("follows/check/<uuid:user_id>", FollowViewSet.as_view({"get": "check"}), name="follow-check"),
    path("follows/<uuid:user_id>", FollowViewSet.as_view({"post": "toggle"}), name="follow-toggle"),
    path("follows/<uuid:user_id>/followers", FollowViewSet.as_view({"get": "followers"}), name="follow-followers"),
    path("follows/<uuid:user_id>/following", FollowViewSet.as_view({"get": "following"}), name="follow-following"),
]
