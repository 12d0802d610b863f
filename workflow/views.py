from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from activities.models import HouseActivity

from .models import ActivityStatusHistory
from .serializers import ActivityStatusHistorySerializer


# Status audit trail of one house activity, newest first
class ActivityStatusHistoryView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, house_activity_id):
        if not HouseActivity.objects.filter(pk=house_activity_id).exists():
            return Response({"error": "House activity not found"}, status=status.HTTP_404_NOT_FOUND)

        history = ActivityStatusHistory.objects.select_related('changed_by').filter(
            house_activity_id=house_activity_id
        )
        return Response({"history": ActivityStatusHistorySerializer(history, many=True).data})
