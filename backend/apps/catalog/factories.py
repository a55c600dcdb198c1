"""factory_boy factories for catalog test data."""

from decimal import Decimal

import factory

from .models import Category, Product, ProductImage, ProductReview, ProductVariant


class CategoryFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Category

    name = factory.Sequence(lambda n: f'Category {n}')
    slug = factory.Sequence(lambda n: f'category-{n}')
    is_active = True


class ProductFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Product

    sku = factory.Sequence(lambda n: f'COF-{n:04d}')
    name = factory.Sequence(lambda n: f'Coffee {n}')
    category = factory.SubFactory(CategoryFactory)
    is_active = True
    is_featured = False


class ProductVariantFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = ProductVariant

    product = factory.SubFactory(ProductFactory)
    variant_sku = factory.Sequence(lambda n: f'VAR-{n:04d}')
    weight = Decimal('250')
    weight_unit = 'g'
    price = Decimal('5.000')
    discount_price = None
    stock_quantity = 10
    low_stock_threshold = 5
    is_active = True
    is_default = False


class ProductImageFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = ProductImage

    product = factory.SubFactory(ProductFactory)
    image_path = factory.Sequence(lambda n: f'/images/products/{n}.jpg')
    file_name = factory.Sequence(lambda n: f'{n}.jpg')


class ProductReviewFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = ProductReview

    product = factory.SubFactory(ProductFactory)
    rating = 5
    customer_name = 'Test Customer'
    customer_email = factory.Sequence(lambda n: f'customer{n}@example.com')
    is_approved = True
