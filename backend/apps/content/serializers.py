"""Content serializers."""

from rest_framework import serializers

from .models import FAQ, FAQCategory, Setting, Slide


class SlideSerializer(serializers.ModelSerializer):
    class Meta:
        model = Slide
        fields = [
            'id', 'title', 'title_ar', 'subtitle', 'subtitle_ar',
            'image_path', 'button_text', 'button_text_ar', 'button_url',
            'background_color', 'text_color', 'display_order', 'is_active',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class FAQCategorySerializer(serializers.ModelSerializer):
    slug = serializers.SlugField(max_length=200, required=False, allow_blank=True)

    class Meta:
        model = FAQCategory
        fields = ['id', 'name', 'name_ar', 'slug', 'display_order', 'is_active']
        read_only_fields = ['id']


class FAQSerializer(serializers.ModelSerializer):
    category_id = serializers.IntegerField(required=False, allow_null=True)
    category_name = serializers.CharField(source='category.name', read_only=True, default=None)

    class Meta:
        model = FAQ
        fields = [
            'id', 'question', 'question_ar', 'answer', 'answer_ar',
            'category_id', 'category_name', 'display_order', 'is_active',
        ]
        read_only_fields = ['id']


class SettingSerializer(serializers.ModelSerializer):
    class Meta:
        model = Setting
        fields = [
            'id', 'key', 'value', 'description', 'description_ar',
            'category', 'data_type', 'is_required', 'updated_at',
        ]
        read_only_fields = ['id', 'updated_at']
        # Key uniqueness is checked by the service layer (409).
        extra_kwargs = {'key': {'validators': []}}


class ReorderSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    display_order = serializers.IntegerField()
