import logging

from django.db import transaction
from django.db.models import Count, Q
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.permissions import IsAdmin, IsReviewerOrAdmin, RolePermissionMixin
from creekside.filters import filter_queryset
from houses.serializers import HouseSerializer
from projects.models import Project
from projects.serializers import ProjectSerializer
from workflow.services import delete_house_activity, update_house_activity
from workflow.status import ActivityStatus

from .filters import ActivityFilter, HouseActivityFilter
from .models import Activity, HouseActivity
from .serializers import (
    ActivitySerializer,
    ActivityWriteSerializer,
    HouseActivitySerializer,
    HouseActivityUpdateSerializer,
)

logger = logging.getLogger('activities')


def get_activity(activity_id):
    try:
        return Activity.objects.get(pk=activity_id)
    except Activity.DoesNotExist:
        return None


def get_house_activity(house_activity_id):
    try:
        return HouseActivity.objects.select_related('house__project').get(pk=house_activity_id)
    except HouseActivity.DoesNotExist:
        return None


def _cascade_payload(body, house, project_ids):
    if house is not None:
        body["house"] = HouseSerializer(house).data
    if project_ids:
        body["projects"] = ProjectSerializer(Project.objects.filter(pk__in=project_ids), many=True).data
    return body


# ============================================================================
# Activity templates
# ============================================================================

class ActivityListCreateView(RolePermissionMixin, APIView):
    permission_classes = [IsAuthenticated]
    method_permissions = {'POST': [IsReviewerOrAdmin]}

    def get(self, request):
        activities = filter_queryset(ActivityFilter, request, Activity.objects.order_by('num'))
        return Response({"activities": ActivitySerializer(activities, many=True).data})

    def post(self, request):
        serializer = ActivityWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            activity = serializer.save()
        logger.info(f"Activity template {activity.num} created by {request.user.pk}")
        return Response({"activity": ActivitySerializer(activity).data}, status=status.HTTP_201_CREATED)


class ActivityDetailView(RolePermissionMixin, APIView):
    permission_classes = [IsAuthenticated]
    method_permissions = {
        'PUT': [IsReviewerOrAdmin],
        'DELETE': [IsAdmin],
    }

    def get(self, request, activity_id):
        activity = get_activity(activity_id)
        if activity is None:
            return Response({"error": "Activity not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response({"activity": ActivitySerializer(activity).data})

    def put(self, request, activity_id):
        activity = get_activity(activity_id)
        if activity is None:
            return Response({"error": "Activity not found"}, status=status.HTTP_404_NOT_FOUND)

        serializer = ActivityWriteSerializer(activity, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        if not serializer.validated_data:
            return Response({"error": "No fields to update"}, status=status.HTTP_400_BAD_REQUEST)

        with transaction.atomic():
            activity = serializer.save()
        return Response({"activity": ActivitySerializer(activity).data})

    def delete(self, request, activity_id):
        activity = get_activity(activity_id)
        if activity is None:
            return Response({"error": "Activity not found"}, status=status.HTTP_404_NOT_FOUND)

        if activity.house_activities.exists():
            return Response(
                {"error": "Cannot delete activity that is used by houses. Set isActive to false instead."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        activity.delete()
        logger.info(f"Activity template {activity_id} deleted by {request.user.pk}")
        return Response({"message": "Activity deleted successfully"})


# ============================================================================
# House activities
# ============================================================================

class HouseActivityListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        house_activities = filter_queryset(
            HouseActivityFilter,
            request,
            HouseActivity.objects.select_related('house__project').order_by('num'),
        )
        return Response({"houseActivities": HouseActivitySerializer(house_activities, many=True).data})


class HouseActivityStatsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        stats = HouseActivity.objects.aggregate(
            pendingActivities=Count('id', filter=Q(status=ActivityStatus.PENDING)),
            completedActivities=Count('id', filter=Q(status=ActivityStatus.COMPLETED)),
            activeActivities=Count('id', filter=~Q(status=ActivityStatus.COMPLETED)),
        )
        return Response({"stats": stats})


class HouseActivityDetailView(RolePermissionMixin, APIView):
    permission_classes = [IsAuthenticated]
    method_permissions = {'DELETE': [IsAdmin]}

    def get(self, request, house_activity_id):
        house_activity = get_house_activity(house_activity_id)
        if house_activity is None:
            return Response({"error": "House activity not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response({"houseActivity": HouseActivitySerializer(house_activity).data})

    def put(self, request, house_activity_id):
        house_activity = get_house_activity(house_activity_id)
        if house_activity is None:
            return Response({"error": "House activity not found"}, status=status.HTTP_404_NOT_FOUND)

        serializer = HouseActivityUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            result = update_house_activity(house_activity, request.user, serializer.to_changes())

        house_activity = get_house_activity(house_activity_id)
        body = {"houseActivity": HouseActivitySerializer(house_activity).data}
        return Response(_cascade_payload(body, result.house, result.project_ids))

    def delete(self, request, house_activity_id):
        house_activity = get_house_activity(house_activity_id)
        if house_activity is None:
            return Response({"error": "House activity not found"}, status=status.HTTP_404_NOT_FOUND)

        with transaction.atomic():
            house, project_ids = delete_house_activity(house_activity)

        body = {"message": "House activity deleted successfully"}
        return Response(_cascade_payload(body, house, project_ids))
