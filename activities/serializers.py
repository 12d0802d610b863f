from rest_framework import serializers, status
from rest_framework.exceptions import APIException

from authentication.models import CustomUser
from workflow.status import ActivityStatus

from .models import Activity, HouseActivity


class DuplicateActivityNumber(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'An activity with this num already exists'
    default_code = 'duplicate_num'


# ============================================================================
# Activity templates
# ============================================================================

class ActivitySerializer(serializers.ModelSerializer):
    subPhase = serializers.CharField(source='sub_phase', read_only=True)
    isActive = serializers.BooleanField(source='is_active', read_only=True)

    class Meta:
        model = Activity
        fields = ['id', 'num', 'phase', 'subPhase', 'activity', 'dependance', 'description', 'isActive']
        read_only_fields = fields


class ActivityWriteSerializer(serializers.Serializer):
    num = serializers.IntegerField(min_value=0)
    phase = serializers.CharField(max_length=255)
    subPhase = serializers.CharField(source='sub_phase', max_length=255)
    activity = serializers.CharField(max_length=500)
    dependance = serializers.JSONField(required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    isActive = serializers.BooleanField(source='is_active', required=False)

    def validate_num(self, value):
        existing = Activity.objects.filter(num=value)
        if self.instance is not None:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise DuplicateActivityNumber(f"Activity number {value} already exists")
        return value

    def validate_dependance(self, value):
        if value is not None and not isinstance(value, list):
            raise serializers.ValidationError("dependance must be a list")
        return value

    def create(self, validated_data):
        return Activity.objects.create(**validated_data)

    def update(self, instance, validated_data):
        for name, value in validated_data.items():
            setattr(instance, name, value)
        instance.save()
        return instance


# ============================================================================
# House activities
# ============================================================================

class HouseActivitySerializer(serializers.ModelSerializer):
    houseId = serializers.UUIDField(source='house_id', read_only=True)
    houseName = serializers.CharField(source='house.name', read_only=True)
    projectId = serializers.UUIDField(source='house.project_id', read_only=True)
    projectName = serializers.SerializerMethodField()
    activityId = serializers.UUIDField(source='template_id', read_only=True)
    subPhase = serializers.CharField(source='sub_phase', read_only=True)
    openDate = serializers.DateTimeField(source='open_date', read_only=True)
    startDate = serializers.DateTimeField(source='start_date', read_only=True)
    completionDate = serializers.DateTimeField(source='completion_date', read_only=True)
    appUserId = serializers.UUIDField(source='app_user_id', read_only=True)
    approvedById = serializers.UUIDField(source='approved_by_id', read_only=True)
    approvedAt = serializers.DateTimeField(source='approved_at', read_only=True)
    rejectedRemarks = serializers.CharField(source='rejected_remarks', read_only=True)
    isBlocked = serializers.BooleanField(source='is_blocked', read_only=True)
    visible = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    lastUpdatedAt = serializers.DateTimeField(source='last_updated_at', read_only=True)

    class Meta:
        model = HouseActivity
        fields = [
            'id', 'houseId', 'houseName', 'projectId', 'projectName', 'activityId',
            'num', 'phase', 'subPhase', 'activity', 'dependance', 'description',
            'openDate', 'startDate', 'completionDate', 'status',
            'appUserId', 'approvedById', 'approvedAt',
            'remarks', 'rejectedRemarks', 'isBlocked', 'visible',
            'createdAt', 'lastUpdatedAt',
        ]
        read_only_fields = fields

    def get_projectName(self, obj):
        project = obj.house.project
        return project.title if project else None

    def get_visible(self, obj):
        return not obj.is_blocked


class HouseActivityUpdateSerializer(serializers.Serializer):
    """
    Partial update of a house activity.

    Only validates shape and references; who may write which field is
    decided by the workflow layer.
    """

    startDate = serializers.DateTimeField(required=False, allow_null=True)
    completionDate = serializers.DateTimeField(required=False, allow_null=True)
    isBlocked = serializers.BooleanField(required=False)
    appUserId = serializers.UUIDField(required=False, allow_null=True)
    remarks = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    rejectedRemarks = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    approvedById = serializers.UUIDField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=ActivityStatus.choices, required=False)

    FIELD_MAP = {
        'startDate': 'start_date',
        'completionDate': 'completion_date',
        'isBlocked': 'is_blocked',
        'appUserId': 'app_user_id',
        'remarks': 'remarks',
        'rejectedRemarks': 'rejected_remarks',
        'approvedById': 'approved_by_id',
        'status': 'status',
    }

    def _check_user(self, value):
        if value is not None and not CustomUser.objects.filter(pk=value).exists():
            raise serializers.ValidationError("User not found")
        return value

    def validate_appUserId(self, value):
        return self._check_user(value)

    def validate_approvedById(self, value):
        return self._check_user(value)

    def to_changes(self):
        """Validated values keyed by model field name."""
        return {self.FIELD_MAP[key]: value for key, value in self.validated_data.items()}
