"""
Order workflow errors.

All of them are DRF ``APIException`` subclasses, so a view can let them
propagate and DRF answers with ``{"detail": ..., "code": ...}`` and the
matching status. Malformed input is reported with DRF's own
``ValidationError`` before any write happens.
"""
from django.utils.translation import gettext_lazy as _
from rest_framework import exceptions, status


class AlreadyAssigned(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = _('The order is no longer available or was already assigned.')
    default_code = 'already_assigned'


class NotAssignedToCaller(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = _('You cannot release an order that is not assigned to you.')
    default_code = 'not_assigned_to_caller'


class Forbidden(exceptions.PermissionDenied):
    default_detail = _('You do not have permission to update this order.')
    default_code = 'forbidden'


class NotFound(exceptions.NotFound):
    default_detail = _('Order not found.')
    default_code = 'not_found'


class InvalidTransition(exceptions.ValidationError):
    default_detail = _('Invalid status transition.')
    default_code = 'invalid_transition'


class BackendError(exceptions.APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = _('The data store could not complete the operation.')
    default_code = 'backend_error'
