from django.utils.translation import gettext_lazy as _
from rest_framework.exceptions import APIException


class AccountBlockedException(APIException):
    status_code = 403
    default_detail = _('Your account has been blocked')
    default_code = 'account_blocked'


class OutOfStockException(APIException):
    """Raised when a cart or order line asks for more units than are available."""
    status_code = 400
    default_detail = _('Item is out of stock')
    default_code = 'out_of_stock'


class UploadRejectedException(APIException):
    status_code = 400
    default_detail = _('File rejected')
    default_code = 'upload_rejected'
