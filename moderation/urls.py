from django.urls import path

from .views import ModerationViewSet, ReportAdminViewSet

urlpatterns = [
    path("moderation/block", ModerationViewSet.as_view({"post": "block"}), name="moderation-block"),
    path("moderation/block/<uuid:user_id>", ModerationViewSet.as_view({"get": "check"}), name="moderation-block-check"),
    path("moderation/blocked", ModerationViewSet.as_view({"get": "blocked"}), name="moderation-blocked"),
    path("moderation/report", ModerationViewSet.as_view({"post": "report"}), name="moderation-report"),
    path("moderation/reports", ReportAdminViewSet.as_view({"get": "list"}), name="moderation-reports"),
    path("moderation/reports/<uuid:report_id>", ReportAdminViewSet.as_view({"patch": "partial_update"}), name="moderation-report-update"),
]
