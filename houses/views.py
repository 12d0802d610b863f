import logging

from django.db import transaction
from django.db.models import Count, Q
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.permissions import IsAdmin, IsReviewerOrAdmin, RolePermissionMixin
from creekside.filters import filter_queryset
from projects.models import Project
from projects.serializers import ProjectSerializer
from workflow.status import HouseStatus

from .filters import HouseFilter
from .models import House
from .serializers import HouseSerializer, HouseWithProjectSerializer, HouseWriteSerializer
from .services import create_house, delete_house, update_house

logger = logging.getLogger('houses')


def _include_project(request):
    return request.query_params.get('includeProject', '').lower() == 'true'


def get_house(house_id):
    try:
        return House.objects.select_related('project').get(pk=house_id)
    except House.DoesNotExist:
        return None


def _projects_payload(project_ids):
    projects = Project.objects.filter(pk__in=project_ids)
    return ProjectSerializer(projects, many=True).data


# List houses - any user; create - reviewer or admin
class HouseListCreateView(RolePermissionMixin, APIView):
    permission_classes = [IsAuthenticated]
    method_permissions = {'POST': [IsReviewerOrAdmin]}

    def get(self, request):
        houses = filter_queryset(
            HouseFilter, request, House.objects.select_related('project').order_by('-created_at')
        )
        serializer_class = HouseWithProjectSerializer if _include_project(request) else HouseSerializer
        return Response({"houses": serializer_class(houses, many=True).data})

    def post(self, request):
        serializer = HouseWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            house, activity_count = create_house(serializer.to_changes())

        return Response(
            {
                "house": HouseSerializer(house).data,
                "activityCount": activity_count,
                "message": f"House created successfully with {activity_count} activities",
            },
            status=status.HTTP_201_CREATED,
        )


class HouseStatsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        stats = House.objects.aggregate(
            totalHouses=Count('id'),
            completedHouses=Count('id', filter=Q(status=HouseStatus.COMPLETED)),
            activeHouses=Count('id', filter=~Q(status=HouseStatus.COMPLETED)),
        )
        return Response({"stats": stats})


class HouseDetailView(RolePermissionMixin, APIView):
    permission_classes = [IsAuthenticated]
    method_permissions = {
        'PUT': [IsReviewerOrAdmin],
        'DELETE': [IsAdmin],
    }

    def get(self, request, house_id):
        house = get_house(house_id)
        if house is None:
            return Response({"error": "House not found"}, status=status.HTTP_404_NOT_FOUND)
        serializer_class = HouseWithProjectSerializer if _include_project(request) else HouseSerializer
        return Response({"house": serializer_class(house).data})

    def put(self, request, house_id):
        house = get_house(house_id)
        if house is None:
            return Response({"error": "House not found"}, status=status.HTTP_404_NOT_FOUND)

        serializer = HouseWriteSerializer(house, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        changes = serializer.to_changes()
        if not changes:
            return Response({"error": "No fields to update"}, status=status.HTTP_400_BAD_REQUEST)

        with transaction.atomic():
            project_ids = update_house(house, changes)

        house = get_house(house_id)
        body = {"house": HouseSerializer(house).data}
        if project_ids:
            body["projects"] = _projects_payload(project_ids)
        return Response(body)

    def delete(self, request, house_id):
        house = get_house(house_id)
        if house is None:
            return Response({"error": "House not found"}, status=status.HTTP_404_NOT_FOUND)

        with transaction.atomic():
            delete_house(house)
        return Response({"message": "House deleted successfully"})
