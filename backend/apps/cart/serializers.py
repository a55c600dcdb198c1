"""Cart serializers."""

from rest_framework import serializers

from .models import Cart, CartItem


class CartItemSerializer(serializers.ModelSerializer):
    variant_id = serializers.IntegerField(read_only=True)
    variant_sku = serializers.CharField(source='variant.variant_sku', read_only=True)
    product_id = serializers.IntegerField(source='variant.product_id', read_only=True)
    product_name = serializers.CharField(source='variant.product.name', read_only=True)
    product_name_ar = serializers.CharField(source='variant.product.name_ar', read_only=True)
    weight = serializers.DecimalField(source='variant.weight', max_digits=10, decimal_places=3, read_only=True)
    weight_unit = serializers.CharField(source='variant.weight_unit', read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=3, read_only=True)

    class Meta:
        model = CartItem
        fields = [
            'id', 'variant_id', 'variant_sku', 'product_id', 'product_name',
            'product_name_ar', 'weight', 'weight_unit', 'quantity',
            'unit_price', 'line_total',
        ]


class CartSerializer(serializers.ModelSerializer):
    items = CartItemSerializer(many=True, read_only=True)
    item_count = serializers.IntegerField(read_only=True)
    total_price = serializers.DecimalField(max_digits=12, decimal_places=3, read_only=True)

    class Meta:
        model = Cart
        fields = ['id', 'items', 'item_count', 'total_price', 'updated_at']


class AddItemSerializer(serializers.Serializer):
    variant_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class UpdateQuantitySerializer(serializers.Serializer):
    quantity = serializers.IntegerField()
