from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import MenuItemViewSet

app_name = "menu"

router = DefaultRouter()
router.register(r"items", MenuItemViewSet, basename="menu-item")

urlpatterns = [
    path("", include(router.urls)),
]
