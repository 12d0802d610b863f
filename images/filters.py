import django_filters

from .models import Image


class ImageFilter(django_filters.FilterSet):
    houseActivityId = django_filters.UUIDFilter(field_name='house_activity_id')

    class Meta:
        model = Image
        fields = ['houseActivityId']
