from rest_framework import status
from rest_framework.exceptions import APIException


class WorkflowError(APIException):
    """Base class for rejected workflow updates. Raising one aborts the transaction."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid workflow update.'
    default_code = 'workflow_error'


class NoPermittedChanges(WorkflowError):
    default_detail = 'No fields to update or insufficient permissions'
    default_code = 'no_permitted_changes'


class ForbiddenActivityUpdate(WorkflowError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You can only update activities assigned to you'
    default_code = 'forbidden_activity_update'


class NoActiveActivities(WorkflowError):
    default_detail = 'No active activities found in master list. Please create active activities first.'
    default_code = 'no_active_activities'


class InvalidReference(WorkflowError):
    default_detail = 'Referenced record not found'
    default_code = 'invalid_reference'
