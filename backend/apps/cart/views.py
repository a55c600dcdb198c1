"""
Cart views. Every endpoint works on the authenticated user's own cart.

Endpoint: /api/v1/cart/
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from . import services
from .serializers import AddItemSerializer, CartSerializer, UpdateQuantitySerializer


class CartViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def list(self, request):
        """GET /api/v1/cart/"""
        return Response(CartSerializer(services.get_cart(request.user)).data)

    @action(detail=False, methods=['post'])
    def items(self, request):
        """POST /api/v1/cart/items/ {variant_id, quantity}"""
        serializer = AddItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cart = services.add_item(request.user, **serializer.validated_data)
        return Response(CartSerializer(cart).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['patch', 'delete'], url_path=r'items/(?P<variant_id>\d+)')
    def item(self, request, variant_id=None):
        """PATCH|DELETE /api/v1/cart/items/{variant_id}/"""
        if request.method == 'DELETE':
            cart = services.remove_item(request.user, int(variant_id))
            return Response(CartSerializer(cart).data)

        serializer = UpdateQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cart = services.update_quantity(request.user, int(variant_id), serializer.validated_data['quantity'])
        return Response(CartSerializer(cart).data)

    @action(detail=False, methods=['post'])
    def clear(self, request):
        """POST /api/v1/cart/clear/"""
        return Response(CartSerializer(services.clear_cart(request.user)).data)
