import django_filters

from workflow.status import ActivityStatus

from .models import Activity, HouseActivity


class ActivityFilter(django_filters.FilterSet):
    isActive = django_filters.BooleanFilter(field_name='is_active')

    class Meta:
        model = Activity
        fields = ['isActive']


class HouseActivityFilter(django_filters.FilterSet):
    houseId = django_filters.UUIDFilter(field_name='house_id')
    isBlocked = django_filters.BooleanFilter(field_name='is_blocked')
    status = django_filters.ChoiceFilter(choices=ActivityStatus.choices)

    class Meta:
        model = HouseActivity
        fields = ['houseId', 'isBlocked', 'status']
