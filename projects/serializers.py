from rest_framework import serializers

from .models import Project


class ProjectSerializer(serializers.ModelSerializer):
    housesCompleted = serializers.IntegerField(source='houses_completed', read_only=True)
    totalHouses = serializers.IntegerField(source='total_houses', read_only=True)
    projectImage = serializers.CharField(source='project_image', read_only=True)
    startDate = serializers.DateField(source='start_date', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    lastUpdatedAt = serializers.DateTimeField(source='last_updated_at', read_only=True)

    class Meta:
        model = Project
        fields = [
            'id', 'title', 'housesCompleted', 'totalHouses', 'projectImage',
            'description', 'startDate', 'status', 'createdAt', 'lastUpdatedAt',
        ]
        read_only_fields = fields


class ProjectWriteSerializer(serializers.Serializer):
    """Create/update payload. On update every field is optional."""

    title = serializers.CharField(max_length=255)
    totalHouses = serializers.IntegerField(source='total_houses', min_value=0)
    housesCompleted = serializers.IntegerField(source='houses_completed', min_value=0, required=False)
    projectImage = serializers.CharField(source='project_image', required=False, allow_blank=True, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    startDate = serializers.DateField(source='start_date', required=False, allow_null=True)
    status = serializers.ChoiceField(choices=Project.STATUS_CHOICES, required=False)

    def validate(self, attrs):
        instance = self.instance
        total = attrs.get('total_houses', instance.total_houses if instance else 0)
        completed = attrs.get('houses_completed', instance.houses_completed if instance else 0)
        if completed > total:
            raise serializers.ValidationError("housesCompleted cannot be greater than totalHouses")
        return attrs

    def create(self, validated_data):
        return Project.objects.create(**validated_data)

    def update(self, instance, validated_data):
        for name, value in validated_data.items():
            setattr(instance, name, value)
        instance.save()
        return instance
