from rest_framework.exceptions import ValidationError


def filter_queryset(filterset_class, request, queryset):
    """
    Apply a django-filter FilterSet to ``queryset`` from the query string.

    Invalid filter values are reported as a 400 with the first form error.
    """
    filterset = filterset_class(request.query_params, queryset=queryset, request=request)
    if not filterset.is_valid():
        field, errors = next(iter(filterset.errors.items()))
        raise ValidationError({field: list(errors)})
    return filterset.qs
