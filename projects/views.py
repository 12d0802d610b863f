import logging

from django.db import transaction
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.permissions import IsAdmin, IsReviewerOrAdmin, RolePermissionMixin
from creekside.filters import filter_queryset
from workflow.services import recount_project_progress

from .filters import ProjectFilter
from .models import Project
from .serializers import ProjectSerializer, ProjectWriteSerializer

logger = logging.getLogger('projects')


def get_project(project_id):
    try:
        return Project.objects.get(pk=project_id)
    except Project.DoesNotExist:
        return None


# List projects - any user; create - reviewer or admin
class ProjectListCreateView(RolePermissionMixin, APIView):
    permission_classes = [IsAuthenticated]
    method_permissions = {'POST': [IsReviewerOrAdmin]}

    def get(self, request):
        projects = filter_queryset(ProjectFilter, request, Project.objects.order_by('-created_at'))
        return Response({"projects": ProjectSerializer(projects, many=True).data})

    def post(self, request):
        serializer = ProjectWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            project = serializer.save()
        logger.info(f"Project {project.pk} created by {request.user.pk}")
        return Response({"project": ProjectSerializer(project).data}, status=status.HTTP_201_CREATED)


class ProjectDetailView(RolePermissionMixin, APIView):
    permission_classes = [IsAuthenticated]
    method_permissions = {
        'PUT': [IsReviewerOrAdmin],
        'DELETE': [IsAdmin],
    }

    def get(self, request, project_id):
        project = get_project(project_id)
        if project is None:
            return Response({"error": "Project not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response({"project": ProjectSerializer(project).data})

    def put(self, request, project_id):
        project = get_project(project_id)
        if project is None:
            return Response({"error": "Project not found"}, status=status.HTTP_404_NOT_FOUND)

        serializer = ProjectWriteSerializer(project, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        if not serializer.validated_data:
            return Response({"error": "No fields to update"}, status=status.HTTP_400_BAD_REQUEST)

        with transaction.atomic():
            project = serializer.save()
        return Response({"project": ProjectSerializer(project).data})

    def delete(self, request, project_id):
        project = get_project(project_id)
        if project is None:
            return Response({"error": "Project not found"}, status=status.HTTP_404_NOT_FOUND)

        if project.houses.exists():
            return Response(
                {"error": "Cannot delete project that has associated houses. "
                          "Delete houses first or update project status instead."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        project.delete()
        logger.info(f"Project {project_id} deleted by {request.user.pk}")
        return Response({"message": "Project deleted successfully"})


# Rebuild the progress counters of one project from its activity rows
class ProjectRecountView(APIView):
    permission_classes = [IsAdmin]

    def post(self, request, project_id):
        project = get_project(project_id)
        if project is None:
            return Response({"error": "Project not found"}, status=status.HTTP_404_NOT_FOUND)

        with transaction.atomic():
            corrections = recount_project_progress(project)
        project.refresh_from_db()
        return Response({
            "project": ProjectSerializer(project).data,
            "corrections": corrections,
        })
