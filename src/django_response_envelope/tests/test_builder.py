import json

from django.core.paginator import Paginator
from django.test import SimpleTestCase, override_settings
from rest_framework import status
from rest_framework.renderers import JSONRenderer

from django_response_envelope.builder import ResponseEnvelopeBuilder
from django_response_envelope.conf import EnvelopeSettings
from django_response_envelope.services.page_meta import PAGINATION_FIELDS


class SuccessTests(SimpleTestCase):
    def setUp(self):
        self.builder = ResponseEnvelopeBuilder(EnvelopeSettings())

    def test_success_response(self):
        response = self.builder.success({'id': 1, 'name': 'Ann'}, hint='show')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.data,
            {'response': {'data': {'entity': {'id': 1, 'name': 'Ann'}, 'meta': {}, 'message': 'Success'}}},
        )

    def test_explicit_status_and_message(self):
        response = self.builder.success([{'id': 1}], message='Accepted', status_code=status.HTTP_202_ACCEPTED)
        self.assertEqual(response.status_code, 202)
        self.assertEqual(response.data['response']['data']['message'], 'Accepted')

    def test_forced_json_rendering(self):
        response = self.builder.success([{'id': 1}])
        self.assertIsInstance(response.accepted_renderer, JSONRenderer)
        response.render()
        self.assertEqual(response['Content-Type'], 'application/json')
        self.assertEqual(json.loads(response.content)['response']['data']['entities'], [{'id': 1}])

    def test_rendering_left_to_negotiation_when_not_forced(self):
        builder = ResponseEnvelopeBuilder(EnvelopeSettings(force_json_response_header=False))
        response = builder.success([])
        self.assertIsNone(response.content_type)
        self.assertIsNone(getattr(response, 'accepted_renderer', None))

    def test_extra_headers(self):
        response = self.builder.success([], headers={'X-Total': '0'})
        self.assertEqual(response['X-Total'], '0')

    def test_payload_dict_helpers(self):
        payload = self.builder.build_success_payload({'id': 1}, hint='update')
        self.assertIn('entity', payload['response']['data'])
        self.assertEqual(
            self.builder.build_error_payload('Broken'),
            {'response': {'data': {'errors': None, 'message': 'Broken'}}},
        )

    def test_json_response_for_plain_views(self):
        response = self.builder.json_response(self.builder.build_success_payload([{'id': 1}]), 201)
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response['Content-Type'], 'application/json')
        self.assertEqual(json.loads(response.content)['response']['data']['entities'], [{'id': 1}])


class ErrorTests(SimpleTestCase):
    def setUp(self):
        self.builder = ResponseEnvelopeBuilder(EnvelopeSettings())

    def test_error_response(self):
        response = self.builder.error('Not found', status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data, {'response': {'data': {'errors': None, 'message': 'Not found'}}})

    def test_error_with_detail(self):
        response = self.builder.error('Conflict', status.HTTP_409_CONFLICT, errors=['duplicate email'])
        self.assertEqual(response.data['response']['data']['errors'], ['duplicate email'])

    def test_error_defaults(self):
        response = self.builder.error()
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['response']['data']['message'], 'Error')


class ShortcutTests(SimpleTestCase):
    def setUp(self):
        self.builder = ResponseEnvelopeBuilder(EnvelopeSettings())

    def test_success_shortcuts(self):
        cases = [
            (self.builder.stored, 'Stored', 201),
            (self.builder.updated, 'Updated', 200),
            (self.builder.deleted, 'Deleted', 204),
        ]
        for method, message, code in cases:
            response = method({'id': 1})
            self.assertEqual(response.status_code, code)
            self.assertEqual(response.data['response']['data']['message'], message)

    def test_shortcuts_follow_hint(self):
        response = self.builder.updated({'id': 1}, hint='update')
        self.assertIn('entity', response.data['response']['data'])
        response = self.builder.stored({'id': 1}, hint='store')
        self.assertIn('entities', response.data['response']['data'])

    def test_error_shortcuts(self):
        cases = [
            (self.builder.not_found, 'Not Found', 404),
            (self.builder.unauthorized, 'Unauthorized', 401),
            (self.builder.forbidden, 'Forbidden', 403),
            (self.builder.server_error, 'Server Error', 500),
        ]
        for method, message, code in cases:
            response = method()
            self.assertEqual(response.status_code, code)
            self.assertEqual(response.data, {'response': {'data': {'errors': None, 'message': message}}})

    def test_validation_error(self):
        response = self.builder.validation_error({'name': ['required']})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.data['response']['data']['errors'], {'name': ['required']})
        self.assertEqual(response.data['response']['data']['message'], 'Validation Error')


class PaginatedTests(SimpleTestCase):
    def setUp(self):
        self.builder = ResponseEnvelopeBuilder(EnvelopeSettings())
        self.page = Paginator([{'id': i} for i in range(1, 6)], 2).page(2)

    def test_paginated_page(self):
        response = self.builder.paginated(self.page)
        data = response.data['response']['data']
        self.assertEqual(data['entities'], [{'id': 3}, {'id': 4}])
        self.assertEqual(set(data['meta']['pagination']), set(PAGINATION_FIELDS))
        self.assertEqual(data['meta']['pagination']['total'], 5)
        self.assertEqual(data['message'], 'Success')

    def test_meta_is_merged_beside_pagination(self):
        response = self.builder.paginated(self.page, {'filters': {'active': True}}, 'Listed')
        data = response.data['response']['data']
        self.assertEqual(data['meta']['filters'], {'active': True})
        self.assertIn('pagination', data['meta'])
        self.assertEqual(data['message'], 'Listed')

    def test_items_replace_page_objects(self):
        response = self.builder.paginated(self.page, items=[{'id': 'x'}])
        self.assertEqual(response.data['response']['data']['entities'], [{'id': 'x'}])

    def test_plain_sequence_has_no_pagination(self):
        response = self.builder.paginated([{'id': 1}, {'id': 2}], {'source': 'list'})
        data = response.data['response']['data']
        self.assertEqual(data['entities'], [{'id': 1}, {'id': 2}])
        self.assertEqual(data['meta'], {'source': 'list'})

    def test_paginated_uses_plural_key_unless_overridden(self):
        response = self.builder.paginated(self.page, data_key='authors')
        self.assertIn('authors', response.data['response']['data'])
        self.assertNotIn('entities', response.data['response']['data'])


class ProcessSettingsTests(SimpleTestCase):
    @override_settings(RESPONSE_ENVELOPE_PLURAL_DATA_KEY='rows', RESPONSE_ENVELOPE_WITHOUT_WRAPPING=True)
    def test_builder_without_explicit_settings_reads_django_settings(self):
        response = ResponseEnvelopeBuilder().success([{'id': 1}])
        self.assertEqual(response.data, {'rows': [{'id': 1}], 'meta': {}, 'message': 'Success'})
