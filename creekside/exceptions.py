import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger('creekside')


def _first_message(data):
    """Pull the first human readable message out of a DRF error payload."""
    if isinstance(data, dict):
        for key, value in data.items():
            message = _first_message(value)
            if message:
                if key in ('detail', 'non_field_errors'):
                    return message
                return f"{key}: {message}"
        return None
    if isinstance(data, (list, tuple)):
        for item in data:
            message = _first_message(item)
            if message:
                return message
        return None
    return str(data) if data else None


def api_exception_handler(exc, context):
    """
    Render every API error as {"error": "..."}.

    Serializer errors keep their field breakdown under "details". Database
    failures that escape a view are logged and reported as a generic 500;
    the surrounding atomic block has already rolled back by then.
    """
    response = exception_handler(exc, context)

    if response is not None:
        data = response.data
        if isinstance(data, dict) and set(data.keys()) == {'detail'}:
            response.data = {'error': str(data['detail'])}
        else:
            response.data = {
                'error': _first_message(data) or 'Invalid request',
                'details': data,
            }
        return response

    if isinstance(exc, DatabaseError):
        view = context.get('view')
        logger.error(
            f"Database error in {view.__class__.__name__ if view else 'unknown view'}: {exc}",
            exc_info=exc,
        )
        return Response(
            {'error': 'Internal server error'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return None
