from rest_framework import serializers

from .models import ActivityStatusHistory


class ActivityStatusHistorySerializer(serializers.ModelSerializer):
    id = serializers.UUIDField(source='history_id', read_only=True)
    houseActivityId = serializers.UUIDField(source='house_activity_id', read_only=True)
    previousStatus = serializers.CharField(source='previous_status', read_only=True)
    newStatus = serializers.CharField(source='new_status', read_only=True)
    changedById = serializers.UUIDField(source='changed_by_id', read_only=True)
    changedBy = serializers.StringRelatedField(source='changed_by')

    class Meta:
        model = ActivityStatusHistory
        fields = [
            'id', 'houseActivityId', 'previousStatus', 'newStatus',
            'changedById', 'changedBy', 'overridden', 'timestamp',
        ]
        read_only_fields = fields
