from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core_backend.base import ReadOnlyBaseViewSet
from users.permissions import IsManager
from .models import Feedback
from .serializers import FeedbackSerializer, FeedbackSubmitSerializer
from .services import FeedbackService


class FeedbackViewSet(ReadOnlyBaseViewSet):
    queryset = Feedback.objects.all()
    serializer_class = FeedbackSerializer
    filterset_fields = ["status", "rating"]
    ordering_fields = ["created_at", "rating"]
    ordering = ["-created_at"]

    def get_permissions(self):
        if self.action == "submit":
            return [AllowAny()]
        return [IsManager()]

    @action(detail=False, methods=["post"], url_path="submit")
    def submit(self, request):
        serializer = FeedbackSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        feedback = FeedbackService.submit(**serializer.validated_data)
        return Response(FeedbackSerializer(feedback).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="review")
    def review(self, request, pk=None):
        feedback = FeedbackService.mark_reviewed(pk, request.user)
        return Response(FeedbackSerializer(feedback).data)
