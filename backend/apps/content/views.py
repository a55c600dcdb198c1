"""
Content views.

Storefront reads are public; writes are admin only.
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.response import Response

from . import services
from .serializers import (
    FAQCategorySerializer,
    FAQSerializer,
    ReorderSerializer,
    SettingSerializer,
    SlideSerializer,
)


def _orders(request):
    serializer = ReorderSerializer(data=request.data, many=True)
    serializer.is_valid(raise_exception=True)
    return {item['id']: item['display_order'] for item in serializer.validated_data}


class AdminWriteMixin:
    """Public reads, admin-only for everything in `admin_actions`."""
    permission_classes = [AllowAny]
    admin_actions = {'create', 'update', 'partial_update', 'destroy', 'reorder', 'toggle_status', 'admin'}

    def get_permissions(self):
        if self.action in self.admin_actions:
            return [IsAdminUser()]
        return super().get_permissions()


class SlideViewSet(AdminWriteMixin, viewsets.ViewSet):
    """Homepage slides. Endpoint: /api/v1/content/slides/"""
    lookup_value_regex = r'\d+'

    def list(self, request):
        return Response(SlideSerializer(services.active_slides(), many=True).data)

    @action(detail=False, methods=['get'])
    def admin(self, request):
        return Response(SlideSerializer(services.all_slides(), many=True).data)

    def retrieve(self, request, pk=None):
        return Response(SlideSerializer(services.get_slide(pk)).data)

    def create(self, request):
        serializer = SlideSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        slide = services.create_slide(serializer.validated_data)
        return Response(SlideSerializer(slide).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        serializer = SlideSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        slide = services.update_slide(pk, serializer.validated_data)
        return Response(SlideSerializer(slide).data)

    def destroy(self, request, pk=None):
        services.delete_slide(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['patch'], url_path='toggle-status')
    def toggle_status(self, request, pk=None):
        slide = services.toggle_slide_status(pk)
        return Response({'id': slide.id, 'is_active': slide.is_active})

    @action(detail=False, methods=['post'])
    def reorder(self, request):
        return Response({'updated': services.reorder_slides(_orders(request))})


class FAQCategoryViewSet(AdminWriteMixin, viewsets.ViewSet):
    """Endpoint: /api/v1/content/faq-categories/"""
    lookup_value_regex = r'\d+'

    def list(self, request):
        categories = services.faq_categories(active_only=not request.user.is_staff)
        return Response(FAQCategorySerializer(categories, many=True).data)

    def create(self, request):
        serializer = FAQCategorySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        category = services.create_faq_category(serializer.validated_data)
        return Response(FAQCategorySerializer(category).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        serializer = FAQCategorySerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        category = services.update_faq_category(pk, serializer.validated_data)
        return Response(FAQCategorySerializer(category).data)

    def destroy(self, request, pk=None):
        services.delete_faq_category(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['post'])
    def reorder(self, request):
        return Response({'updated': services.reorder_faq_categories(_orders(request))})


class FAQViewSet(AdminWriteMixin, viewsets.ViewSet):
    """Endpoint: /api/v1/content/faqs/?category=<slug>"""
    lookup_value_regex = r'\d+'

    def list(self, request):
        faqs = services.public_faqs(request.query_params.get('category'))
        return Response(FAQSerializer(faqs, many=True).data)

    @action(detail=False, methods=['get'])
    def admin(self, request):
        return Response(FAQSerializer(services.all_faqs(), many=True).data)

    def create(self, request):
        serializer = FAQSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        faq = services.create_faq(serializer.validated_data)
        return Response(FAQSerializer(faq).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        serializer = FAQSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        faq = services.update_faq(pk, serializer.validated_data)
        return Response(FAQSerializer(faq).data)

    def destroy(self, request, pk=None):
        services.delete_faq(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['post'])
    def reorder(self, request):
        return Response({'updated': services.reorder_faqs(_orders(request))})


class SettingViewSet(viewsets.ViewSet):
    """
    Site settings, addressed by key. Admin only.

    Endpoint: /api/v1/content/settings/{key}/
    """
    permission_classes = [IsAdminUser]
    lookup_field = 'key'
    lookup_value_regex = r'[\w.\-]+'

    def list(self, request):
        settings = services.all_settings(request.query_params.get('category'))
        return Response(SettingSerializer(settings, many=True).data)

    def retrieve(self, request, key=None):
        return Response(SettingSerializer(services.get_setting(key)).data)

    def create(self, request):
        serializer = SettingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        setting = services.create_setting(serializer.validated_data)
        return Response(SettingSerializer(setting).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, key=None):
        serializer = SettingSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        setting = services.update_setting(key, serializer.validated_data)
        return Response(SettingSerializer(setting).data)

    def destroy(self, request, key=None):
        services.delete_setting(key)
        return Response(status=status.HTTP_204_NO_CONTENT)
