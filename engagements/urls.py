from rest_framework.routers import SimpleRouter

from .views import BookmarkViewSet, LikeViewSet

router = SimpleRouter(trailing_slash=False)
router.register(r"likes", LikeViewSet, basename="like")
router.register(r"bookmarks", BookmarkViewSet, basename="bookmark")

urlpatterns = router.urls
