from rest_framework import serializers

from projects.serializers import ProjectSerializer
from workflow.status import HouseStatus

from .models import House


class HouseSerializer(serializers.ModelSerializer):
    projectId = serializers.UUIDField(source='project_id', read_only=True)
    houseName = serializers.CharField(source='name', read_only=True)
    houseImage = serializers.CharField(source='house_image', read_only=True)
    completedActivities = serializers.IntegerField(source='completed_activities', read_only=True)
    totalActivities = serializers.IntegerField(source='total_activities', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = House
        fields = [
            'id', 'projectId', 'coto', 'name', 'houseName', 'model', 'status',
            'progress', 'description', 'houseImage', 'm2const',
            'completedActivities', 'totalActivities', 'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


class HouseWithProjectSerializer(HouseSerializer):
    """House plus the project it belongs to (``?includeProject=true``)."""

    projectName = serializers.SerializerMethodField()
    project = ProjectSerializer(read_only=True)

    class Meta(HouseSerializer.Meta):
        fields = HouseSerializer.Meta.fields + ['projectName', 'project']
        read_only_fields = fields

    def get_projectName(self, obj):
        return obj.project.title if obj.project else None


class HouseWriteSerializer(serializers.Serializer):
    """
    Create/update payload for a house.

    ``houseName`` is accepted as an alias of ``name`` and wins when both are sent. The activity counters
    can only be set on update; on create they come from the templates.
    """

    projectId = serializers.UUIDField(required=False, allow_null=True)
    coto = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    name = serializers.CharField(max_length=255, required=False)
    houseName = serializers.CharField(max_length=255, required=False)
    model = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    status = serializers.ChoiceField(choices=HouseStatus.choices, required=False)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    houseImage = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    m2const = serializers.FloatField(required=False, allow_null=True, min_value=0)
    completedActivities = serializers.IntegerField(required=False, min_value=0)
    totalActivities = serializers.IntegerField(required=False, min_value=0)

    FIELD_MAP = {
        'projectId': 'project_id',
        'coto': 'coto',
        'name': 'name',
        'model': 'model',
        'status': 'status',
        'description': 'description',
        'houseImage': 'house_image',
        'm2const': 'm2const',
        'completedActivities': 'completed_activities',
        'totalActivities': 'total_activities',
    }

    def validate(self, attrs):
        if 'houseName' in attrs:
            attrs['name'] = attrs.pop('houseName')

        if self.instance is None:
            if not attrs.get('name'):
                raise serializers.ValidationError("name or houseName is required")
            if 'completedActivities' in attrs or 'totalActivities' in attrs:
                raise serializers.ValidationError("Activity counters are set from the activity templates")
        else:
            total = attrs.get('totalActivities', self.instance.total_activities)
            completed = attrs.get('completedActivities', self.instance.completed_activities)
            if completed > total:
                raise serializers.ValidationError(
                    "completedActivities cannot be greater than totalActivities"
                )
        return attrs

    def to_changes(self):
        """Validated values keyed by model field name."""
        return {self.FIELD_MAP[key]: value for key, value in self.validated_data.items()}
