# chat/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import AdminChatSessionViewSet, ChatSessionViewSet

app_name = "chat"

router = DefaultRouter()
router.register(r"sessions", ChatSessionViewSet, basename="session")
router.register(r"admin/sessions", AdminChatSessionViewSet, basename="admin-session")

urlpatterns = [
    path("", include(router.urls)),
]
