from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core_backend.base import BaseViewSet
from users.permissions import IsManager
from .filters import MenuItemFilter
from .models import MenuItem
from .serializers import MenuItemSerializer, MenuAvailabilitySerializer
from .services import MenuService


class MenuItemViewSet(BaseViewSet):
    """
    Menu browsing is public; changing the menu is a manager action.
    """

    queryset = MenuItem.objects.all()
    serializer_class = MenuItemSerializer
    filterset_class = MenuItemFilter
    search_fields = ["name", "description"]
    ordering_fields = ["name", "price", "category"]
    ordering = ["category", "name"]

    def get_permissions(self):
        if self.action in ["list", "retrieve"]:
            return [AllowAny()]
        return [IsManager()]

    def perform_destroy(self, instance):
        MenuService.delete_item(instance)

    @action(detail=True, methods=["post"], url_path="toggle-availability")
    def toggle_availability(self, request, pk=None):
        menu_item = self.get_object()
        serializer = MenuAvailabilitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        MenuService.set_availability(menu_item, serializer.validated_data["available"])
        return Response(MenuItemSerializer(menu_item).data, status=status.HTTP_200_OK)
