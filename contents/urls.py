from rest_framework.routers import SimpleRouter

from .views import BugViewSet, DocViewSet, SnippetViewSet

router = SimpleRouter(trailing_slash=False)
router.register(r"snippets", SnippetViewSet, basename="snippet")
router.register(r"docs", DocViewSet, basename="doc")
router.register(r"bugs", BugViewSet, basename="bug")

urlpatterns = router.urls
