import logging

from django.db import transaction
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from activities.models import HouseActivity
from authentication.models import Role
from creekside.filters import filter_queryset

from .filters import ImageFilter
from .models import Image
from .serializers import ImageCreateSerializer, ImageSerializer, ImageUpdateSerializer

logger = logging.getLogger('images')


def get_image(image_id):
    try:
        return Image.objects.get(pk=image_id)
    except Image.DoesNotExist:
        return None


def can_manage_image(user, image):
    """Uploaders manage their own photos; reviewers and admins manage all."""
    return user.role in (Role.REVIEWER, Role.ADMIN) or image.app_user_id == user.id


class ImageListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        images = filter_queryset(ImageFilter, request, Image.objects.order_by('-uploaded_at'))
        return Response({"images": ImageSerializer(images, many=True).data})

    def post(self, request):
        serializer = ImageCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"error": "houseActivityId and url are required", "details": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )
        data = serializer.validated_data

        if not HouseActivity.objects.filter(pk=data['houseActivityId']).exists():
            return Response({"error": "House activity not found"}, status=status.HTTP_404_NOT_FOUND)

        with transaction.atomic():
            image = Image.objects.create(
                house_activity_id=data['houseActivityId'],
                app_user=request.user,
                url=data['url'],
                caption=data.get('caption') or None,
            )
        logger.info(f"Image {image.pk} attached to activity {image.house_activity_id} by {request.user.pk}")
        return Response({"image": ImageSerializer(image).data}, status=status.HTTP_201_CREATED)


class ImageDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, image_id):
        image = get_image(image_id)
        if image is None:
            return Response({"error": "Image not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response({"image": ImageSerializer(image).data})

    def put(self, request, image_id):
        image = get_image(image_id)
        if image is None:
            return Response({"error": "Image not found"}, status=status.HTTP_404_NOT_FOUND)
        if not can_manage_image(request.user, image):
            return Response({"error": "You can only update your own images"}, status=status.HTTP_403_FORBIDDEN)

        serializer = ImageUpdateSerializer(image, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        if not serializer.validated_data:
            return Response({"error": "No fields to update"}, status=status.HTTP_400_BAD_REQUEST)

        with transaction.atomic():
            image = serializer.save()
        return Response({"image": ImageSerializer(image).data})

    def delete(self, request, image_id):
        image = get_image(image_id)
        if image is None:
            return Response({"error": "Image not found"}, status=status.HTTP_404_NOT_FOUND)
        if not can_manage_image(request.user, image):
            return Response({"error": "You can only delete your own images"}, status=status.HTTP_403_FORBIDDEN)

        image.delete()
        return Response({"message": "Image deleted successfully"})
