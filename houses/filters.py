import django_filters

from workflow.status import HouseStatus

from .models import House


class HouseFilter(django_filters.FilterSet):
    projectId = django_filters.UUIDFilter(field_name='project_id')
    coto = django_filters.CharFilter(field_name='coto')
    status = django_filters.ChoiceFilter(choices=HouseStatus.choices)

    class Meta:
        model = House
        fields = ['projectId', 'coto', 'status']
