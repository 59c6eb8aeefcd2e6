import logging

from django.db import transaction
from rest_framework import viewsets, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_yasg.utils import swagger_auto_schema

from authentication.core.base_view import BaseAPIView
from authentication.core.response import standardized_response, first_error_message
from .models import Address
from .serializers import AddressSerializer

logger = logging.getLogger(__name__)


class AddressViewSet(viewsets.ViewSetMixin, BaseAPIView):
    """
    Address book of the signed-in customer.

    The first address saved becomes the default. Marking an address as
    default clears the flag on every other address; deleting the default
    promotes the most recently added remaining address.
    """
    permission_classes = [IsAuthenticated]

    def get_address(self, request, pk):
        return Address.objects.filter(pk=pk, user=request.user).first()

    def _not_found(self):
        return Response(
            standardized_response(success=False, error="Address not found"),
            status=status.HTTP_404_NOT_FOUND
        )

    @swagger_auto_schema(responses={200: AddressSerializer(many=True)})
    def list(self, request):
        addresses = Address.objects.filter(user=request.user).order_by('-is_default', '-created_at')
        return Response(standardized_response(data=AddressSerializer(addresses, many=True).data))

    @swagger_auto_schema(request_body=AddressSerializer)
    def create(self, request):
        serializer = AddressSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                standardized_response(success=False, error=first_error_message(serializer.errors)),
                status=status.HTTP_400_BAD_REQUEST
            )

        with transaction.atomic():
            is_default = serializer.validated_data.get('is_default', False)
            if is_default:
                Address.objects.filter(user=request.user, is_default=True).update(is_default=False)
            elif not Address.objects.filter(user=request.user).exists():
                is_default = True
            address = serializer.save(user=request.user, is_default=is_default)

        return Response(
            standardized_response(message="Address added successfully", data=AddressSerializer(address).data),
            status=status.HTTP_201_CREATED
        )

    def retrieve(self, request, pk=None):
        address = self.get_address(request, pk)
        if address is None:
            return self._not_found()
        return Response(standardized_response(data=AddressSerializer(address).data))

    @swagger_auto_schema(request_body=AddressSerializer)
    def update(self, request, pk=None):
        address = self.get_address(request, pk)
        if address is None:
            return self._not_found()

        serializer = AddressSerializer(address, data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(
                standardized_response(success=False, error=first_error_message(serializer.errors)),
                status=status.HTTP_400_BAD_REQUEST
            )

        with transaction.atomic():
            # Unsetting the only default is ignored.
            if 'is_default' in request.data and not serializer.validated_data.get('is_default') and address.is_default:
                serializer.validated_data['is_default'] = True
            address = serializer.save()
            if address.is_default:
                Address.objects.filter(user=request.user, is_default=True).exclude(pk=address.pk).update(is_default=False)

        return Response(standardized_response(
            message="Address updated successfully", data=AddressSerializer(address).data
        ))

    def destroy(self, request, pk=None):
        address = self.get_address(request, pk)
        if address is None:
            return self._not_found()

        with transaction.atomic():
            was_default = address.is_default
            address.delete()
            if was_default:
                newest = Address.objects.filter(user=request.user).order_by('-created_at').first()
                if newest:
                    newest.make_default()

        return Response(standardized_response(message="Address deleted successfully"))

    def make_default(self, request, pk=None):
        address = self.get_address(request, pk)
        if address is None:
            return self._not_found()
        with transaction.atomic():
            address.make_default()
        return Response(standardized_response(
            message="Default address updated", data=AddressSerializer(address).data
        ))
