"""
Tests for content app: slides, FAQs and site settings.
"""

from decimal import Decimal

import pytest

from apps.core.exceptions import Conflict, IntegrityConflict, ValidationFailed
from . import services
from .models import FAQ, FAQCategory, Setting, Slide


@pytest.fixture
def slides(db):
    return [
        Slide.objects.create(title='Second', image_path='/img/2.jpg', display_order=2),
        Slide.objects.create(title='First', image_path='/img/1.jpg', display_order=1),
        Slide.objects.create(title='Hidden', image_path='/img/3.jpg', display_order=0, is_active=False),
    ]


@pytest.fixture
def faq_category(db):
    return FAQCategory.objects.create(name='Shipping', slug='shipping')


@pytest.mark.django_db
class TestSlides:
    def test_public_list_is_active_and_ordered(self, api_client, slides):
        response = api_client.get('/api/v1/content/slides/')

        assert response.status_code == 200
        assert [s['title'] for s in response.data] == ['First', 'Second']

    def test_writes_refresh_cached_list(self, slides):
        assert len(services.active_slides()) == 2

        services.toggle_slide_status(slides[2].id)

        assert len(services.active_slides()) == 3

    def test_create_requires_admin(self, customer_client):
        response = customer_client.post('/api/v1/content/slides/', {
            'title': 'Eid offers', 'image_path': '/img/eid.jpg',
        }, format='json')

        assert response.status_code == 403

    def test_reorder(self, admin_client, slides):
        response = admin_client.post('/api/v1/content/slides/reorder/', [
            {'id': slides[0].id, 'display_order': 0},
        ], format='json')

        assert response.data == {'updated': 1}
        assert admin_client.get('/api/v1/content/slides/').data[0]['title'] == 'Second'


@pytest.mark.django_db
class TestFAQs:
    def test_public_faqs_by_category(self, api_client, faq_category):
        FAQ.objects.create(question='How long is delivery?', answer='Two days.', category=faq_category)
        FAQ.objects.create(question='Do you grind?', answer='Yes.')
        FAQ.objects.create(question='Old', answer='Gone.', is_active=False)

        response = api_client.get('/api/v1/content/faqs/', {'category': 'shipping'})
        assert [f['question'] for f in response.data] == ['How long is delivery?']

        response = api_client.get('/api/v1/content/faqs/')
        assert len(response.data) == 2

    def test_create_faq_in_category(self, admin_client, faq_category):
        response = admin_client.post('/api/v1/content/faqs/', {
            'question': 'Can I return beans?',
            'answer': 'Unopened bags only.',
            'category_id': faq_category.id,
        }, format='json')

        assert response.status_code == 201
        assert response.data['category_name'] == 'Shipping'

    def test_category_slug_conflict(self, faq_category):
        with pytest.raises(IntegrityConflict):
            services.create_faq_category({'name': 'Shipping'})

    def test_delete_category_with_faqs_is_a_conflict(self, faq_category):
        faq = FAQ.objects.create(question='Q', answer='A', category=faq_category)

        with pytest.raises(Conflict):
            services.delete_faq_category(faq_category.id)

        faq.delete()
        services.delete_faq_category(faq_category.id)
        assert not FAQCategory.objects.exists()


@pytest.mark.django_db
class TestSettings:
    @pytest.fixture
    def free_shipping(self, db):
        return Setting.objects.create(
            key='shipping.free_threshold',
            value='20',
            data_type=Setting.DataType.NUMBER,
            category='Shipping',
            is_required=True,
        )

    def test_typed_getters(self, free_shipping):
        Setting.objects.create(key='store.open', value='Yes', data_type=Setting.DataType.BOOLEAN)

        assert services.get_number('shipping.free_threshold') == Decimal('20')
        assert services.get_bool('store.open') is True
        assert services.get_value('missing', 'fallback') == 'fallback'

    def test_value_must_match_type(self, free_shipping):
        with pytest.raises(ValidationFailed):
            services.update_setting('shipping.free_threshold', {'value': 'twenty'})

    def test_required_setting_cannot_be_deleted(self, free_shipping):
        with pytest.raises(Conflict):
            services.delete_setting('shipping.free_threshold')

    def test_settings_api_is_admin_only(self, customer_client, free_shipping):
        assert customer_client.get('/api/v1/content/settings/').status_code == 403

    def test_duplicate_key_is_a_conflict(self, admin_client, free_shipping):
        response = admin_client.post('/api/v1/content/settings/', {
            'key': 'shipping.free_threshold', 'value': '10',
        }, format='json')

        assert response.status_code == 409
        assert 'key' in response.data['errors']

    def test_retrieve_by_key(self, admin_client, free_shipping):
        response = admin_client.get('/api/v1/content/settings/shipping.free_threshold/')

        assert response.status_code == 200
        assert response.data['value'] == '20'
