from core_backend.base import ReadOnlyBaseViewSet
from rest_framework.decorators import action
from rest_framework.response import Response

from orders.services import WaiterStatsService
from .models import User
from .serializers import StaffSerializer


class StaffViewSet(ReadOnlyBaseViewSet):
    """
    Staff directory. ?role=waiter narrows the list.
    """

    queryset = User.objects.filter(is_active=True)
    serializer_class = StaffSerializer
    filterset_fields = ["role"]
    search_fields = ["username", "first_name", "last_name"]
    ordering = ["username"]

    @action(detail=True, methods=["get"], url_path="stats")
    def stats(self, request, pk=None):
        """Service statistics for a waiter."""
        waiter = self.get_object()
        return Response(WaiterStatsService.get_stats(waiter))
