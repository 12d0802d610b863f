from rest_framework import serializers

from .models import Image


class ImageSerializer(serializers.ModelSerializer):
    houseActivityId = serializers.UUIDField(source='house_activity_id', read_only=True)
    appUserId = serializers.UUIDField(source='app_user_id', read_only=True)
    uploadedAt = serializers.DateTimeField(source='uploaded_at', read_only=True)

    class Meta:
        model = Image
        fields = ['id', 'houseActivityId', 'appUserId', 'url', 'caption', 'uploadedAt']
        read_only_fields = fields


class ImageCreateSerializer(serializers.Serializer):
    houseActivityId = serializers.UUIDField()
    url = serializers.CharField()
    caption = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ImageUpdateSerializer(serializers.Serializer):
    url = serializers.CharField(required=False)
    caption = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def update(self, instance, validated_data):
        for name, value in validated_data.items():
            setattr(instance, name, value)
        instance.save()
        return instance
