from rest_framework.routers import SimpleRouter

from .views import CommentViewSet

router = SimpleRouter(trailing_slash=False)
router.register(r"comments", CommentViewSet, basename="comment")

urlpatterns = router.urls
