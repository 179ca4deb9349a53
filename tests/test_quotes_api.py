"""
Tests for the quote endpoints
"""
import pytest


@pytest.mark.integration
class TestCreateAndRead:
    """Tests for creating, listing and reading quotes"""

    def test_create_quote_returns_tree(self, client, auth_headers, quote_payload, user):
        response = client.post('/api/quotes', json=quote_payload(), headers=auth_headers)
        assert response.status_code == 201

        quote = response.get_json()
        assert quote['id']
        assert quote['user_id'] == user[0]['id']
        assert quote['status'] == 'draft'
        assert len(quote['spaces']) == 1
        items = quote['spaces'][0]['items']
        assert [item['price'] for item in items] == [600, 400]
        assert items[0]['material'] == 'Oak'

    def test_get_quote(self, client, auth_headers, create_quote):
        quote = create_quote()
        response = client.get(f"/api/quotes/{quote['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.get_json() == quote

    def test_list_only_returns_own_quotes(self, client, auth_headers, other_auth_headers, create_quote):
        mine = create_quote()
        create_quote(headers=other_auth_headers, client_name='Other Client')

        response = client.get('/api/quotes', headers=auth_headers)
        assert response.status_code == 200
        assert [q['id'] for q in response.get_json()] == [mine['id']]

    def test_invalid_quote_lists_offending_fields(self, client, auth_headers, quote_payload):
        payload = quote_payload(status='unknown')
        payload['spaces'][0]['items'][0]['depth'] = 'deep'
        response = client.post('/api/quotes', json=payload, headers=auth_headers)

        assert response.status_code == 400
        error = response.get_json()['error']
        assert error['code'] == 'VALIDATION_ERROR'
        fields = {d['field'] for d in error['details']}
        assert fields == {'status', 'spaces[0].items[0].depth'}

    def test_infinite_total_is_a_validation_error(self, client, auth_headers):
        response = client.post(
            '/api/quotes', data='{"client_name": "A", "total": Infinity}',
            content_type='application/json', headers=auth_headers
        )
        assert response.status_code == 400
        error = response.get_json()['error']
        assert error['code'] == 'VALIDATION_ERROR'
        assert 'total' in {d['field'] for d in error['details']}

    def test_malformed_json(self, client, auth_headers):
        response = client.post(
            '/api/quotes', data='{"client_name": ',
            content_type='application/json', headers=auth_headers
        )
        assert response.status_code == 400
        assert response.get_json()['error']['code'] == 'INVALID_JSON'

    def test_missing_quote_is_404(self, client, auth_headers):
        response = client.get('/api/quotes/does-not-exist', headers=auth_headers)
        assert response.status_code == 404
        assert response.get_json()['error']['code'] == 'NOT_FOUND'

    def test_other_users_quote_is_403(self, client, other_auth_headers, create_quote):
        quote = create_quote()
        response = client.get(f"/api/quotes/{quote['id']}", headers=other_auth_headers)
        assert response.status_code == 403
        assert response.get_json()['error']['code'] == 'FORBIDDEN'


@pytest.mark.integration
class TestUpdate:
    """Tests for full replacement of a quote"""

    def test_update_replaces_spaces_and_items(self, client, auth_headers, create_quote, quote_payload):
        quote = create_quote()
        old_item_ids = {i['id'] for s in quote['spaces'] for i in s['items']}

        payload = quote_payload(
            status='pending',
            total=750,
            spaces=[
                {'name': 'Pantry', 'items': [{'width': 20, 'height': 80, 'depth': 20, 'price': 350}]},
                {'name': 'Laundry', 'items': [{'width': 30, 'height': 30, 'depth': 20, 'price': 400}]},
            ]
        )
        response = client.put(f"/api/quotes/{quote['id']}", json=payload, headers=auth_headers)
        assert response.status_code == 200

        updated = response.get_json()
        assert updated['status'] == 'pending'
        assert updated['total'] == 750
        assert [s['name'] for s in updated['spaces']] == ['Pantry', 'Laundry']
        new_item_ids = {i['id'] for s in updated['spaces'] for i in s['items']}
        assert new_item_ids.isdisjoint(old_item_ids)

        # Persisted, not just echoed
        fetched = client.get(f"/api/quotes/{quote['id']}", headers=auth_headers).get_json()
        assert fetched['spaces'] == updated['spaces']

    def test_update_with_empty_spaces(self, client, auth_headers, create_quote, quote_payload):
        quote = create_quote()
        response = client.put(
            f"/api/quotes/{quote['id']}", json=quote_payload(spaces=[]), headers=auth_headers
        )
        assert response.status_code == 200
        assert response.get_json()['spaces'] == []

    def test_update_other_users_quote_is_403(self, client, other_auth_headers, create_quote, quote_payload):
        quote = create_quote()
        response = client.put(
            f"/api/quotes/{quote['id']}", json=quote_payload(), headers=other_auth_headers
        )
        assert response.status_code == 403

    def test_update_missing_quote_is_404(self, client, auth_headers, quote_payload):
        response = client.put('/api/quotes/missing', json=quote_payload(), headers=auth_headers)
        assert response.status_code == 404


@pytest.mark.integration
class TestDelete:
    """Tests for deleting a quote"""

    def test_delete_quote(self, client, auth_headers, create_quote):
        quote = create_quote()
        response = client.delete(f"/api/quotes/{quote['id']}", headers=auth_headers)
        assert response.status_code == 204
        assert response.data == b''

        assert client.get(f"/api/quotes/{quote['id']}", headers=auth_headers).status_code == 404

    def test_delete_other_users_quote_is_403(self, client, other_auth_headers, create_quote):
        quote = create_quote()
        response = client.delete(f"/api/quotes/{quote['id']}", headers=other_auth_headers)
        assert response.status_code == 403

    def test_orders_survive_quote_deletion(self, client, auth_headers, create_order):
        order = create_order()
        response = client.delete(f"/api/quotes/{order['quote_id']}", headers=auth_headers)
        assert response.status_code == 204

        fetched = client.get(f"/api/orders/{order['id']}", headers=auth_headers).get_json()
        assert fetched['quote_id'] is None
        assert fetched['quote'] is None
        assert fetched['client_name'] == order['client_name']


@pytest.mark.integration
class TestConvert:
    """Tests for converting quotes into orders"""

    def test_convert_approved_quote(self, client, auth_headers, create_quote):
        quote = create_quote(status='approved', adjustment_type='discount',
                             adjustment_percentage=10, adjusted_total=900)
        response = client.post(f"/api/quotes/{quote['id']}/convert", headers=auth_headers)
        assert response.status_code == 201

        order = response.get_json()
        assert order['status'] == 'pending'
        assert order['quote_id'] == quote['id']
        for field in ('client_name', 'email', 'phone', 'project_name', 'installation_address',
                      'total', 'adjustment_type', 'adjustment_percentage', 'adjusted_total'):
            assert order[field] == quote[field]
        assert order['receipts'] == []

    @pytest.mark.parametrize('status', ['draft', 'pending', 'rejected'])
    def test_only_approved_quotes_convert(self, client, auth_headers, create_quote, status):
        quote = create_quote(status=status)
        response = client.post(f"/api/quotes/{quote['id']}/convert", headers=auth_headers)
        assert response.status_code == 400
        assert response.get_json()['error']['code'] == 'INVALID_STATE'

    def test_convert_other_users_quote_is_403(self, client, other_auth_headers, create_quote):
        quote = create_quote(status='approved')
        response = client.post(f"/api/quotes/{quote['id']}/convert", headers=other_auth_headers)
        assert response.status_code == 403

    def test_convert_missing_quote_is_404(self, client, auth_headers):
        response = client.post('/api/quotes/missing/convert', headers=auth_headers)
        assert response.status_code == 404
