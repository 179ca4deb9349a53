"""
Tests for the settings endpoints: preset values, pricing rules, templates
"""
import pytest


@pytest.mark.integration
class TestPresetValues:
    """Tests for the preset values singleton"""

    def test_null_until_saved(self, client, auth_headers):
        response = client.get('/api/settings/preset-values', headers=auth_headers)
        assert response.status_code == 200
        assert response.get_json() is None

    def test_upsert_keeps_single_row(self, client, auth_headers, preset_values_payload):
        first = client.put('/api/settings/preset-values', json=preset_values_payload, headers=auth_headers)
        assert first.status_code == 200
        assert first.get_json()['id'] == '1'

        preset_values_payload['labor_rate'] = 85
        second = client.put('/api/settings/preset-values', json=preset_values_payload, headers=auth_headers)
        assert second.get_json()['id'] == '1'
        assert second.get_json()['labor_rate'] == 85

        fetched = client.get('/api/settings/preset-values', headers=auth_headers).get_json()
        assert fetched['labor_rate'] == 85
        assert fetched['tax_rate'] == 1.5

    def test_invalid_preset_values(self, client, auth_headers, preset_values_payload):
        preset_values_payload['tax_rate'] = 'high'
        response = client.put('/api/settings/preset-values', json=preset_values_payload, headers=auth_headers)
        assert response.status_code == 400
        assert response.get_json()['error']['details'][0]['field'] == 'tax_rate'


@pytest.mark.integration
class TestPricingRules:
    """Tests for pricing rule management"""

    def test_formula_is_returned_in_order(self, client, auth_headers, pricing_rule_payload):
        response = client.post('/api/settings/pricing-rules', json=pricing_rule_payload(), headers=auth_headers)
        assert response.status_code == 201

        rule = response.get_json()
        assert [step['order'] for step in rule['formula']] == [0, 1]
        assert rule['formula'][0]['right_operand'] == '1.15'

        fetched = client.get(f"/api/settings/pricing-rules/{rule['id']}", headers=auth_headers).get_json()
        assert fetched['formula'] == rule['formula']

    def test_list_rules(self, client, auth_headers, pricing_rule_payload):
        client.post('/api/settings/pricing-rules', json=pricing_rule_payload(name='Zeta'), headers=auth_headers)
        client.post('/api/settings/pricing-rules', json=pricing_rule_payload(name='Alpha'), headers=auth_headers)

        rules = client.get('/api/settings/pricing-rules', headers=auth_headers).get_json()
        assert [r['name'] for r in rules] == ['Alpha', 'Zeta']

    def test_update_replaces_formula(self, client, auth_headers, pricing_rule_payload):
        rule = client.post('/api/settings/pricing-rules', json=pricing_rule_payload(), headers=auth_headers).get_json()
        old_step_ids = {step['id'] for step in rule['formula']}

        payload = pricing_rule_payload(name='Renamed', formula=[
            {'left_operand': 'depth', 'operator': '+', 'right_operand': 'delivery_fee',
             'right_operand_type': 'preset', 'order': 0}
        ])
        response = client.put(f"/api/settings/pricing-rules/{rule['id']}", json=payload, headers=auth_headers)
        assert response.status_code == 200

        updated = response.get_json()
        assert updated['name'] == 'Renamed'
        assert len(updated['formula']) == 1
        assert updated['formula'][0]['id'] not in old_step_ids

    def test_missing_rule(self, client, auth_headers, pricing_rule_payload):
        assert client.get('/api/settings/pricing-rules/missing', headers=auth_headers).status_code == 404
        response = client.put('/api/settings/pricing-rules/missing', json=pricing_rule_payload(), headers=auth_headers)
        assert response.status_code == 404

    def test_delete_rule(self, client, auth_headers, pricing_rule_payload):
        rule = client.post('/api/settings/pricing-rules', json=pricing_rule_payload(), headers=auth_headers).get_json()
        response = client.delete(f"/api/settings/pricing-rules/{rule['id']}", headers=auth_headers)
        assert response.status_code == 204
        assert client.get(f"/api/settings/pricing-rules/{rule['id']}", headers=auth_headers).status_code == 404

    def test_invalid_operator(self, client, auth_headers, pricing_rule_payload):
        payload = pricing_rule_payload()
        payload['formula'][0]['operator'] = '^'
        response = client.post('/api/settings/pricing-rules', json=payload, headers=auth_headers)
        assert response.status_code == 400
        assert response.get_json()['error']['details'][0]['field'] == 'formula[0].operator'


@pytest.mark.integration
class TestTemplates:
    """Tests for template settings"""

    def test_null_when_absent(self, client, auth_headers):
        response = client.get('/api/settings/templates/quote', headers=auth_headers)
        assert response.status_code == 200
        assert response.get_json() is None

    def test_upsert_by_type(self, client, auth_headers):
        settings = {'header': {'logo': True, 'title': 'Quote'}, 'columns': ['name', 'price'], 'margin': 12}
        first = client.put('/api/settings/templates/quote', json={'settings': settings}, headers=auth_headers)
        assert first.status_code == 200
        assert first.get_json()['settings'] == settings

        second = client.put('/api/settings/templates/quote', json={'settings': {'margin': 8}}, headers=auth_headers)
        assert second.get_json()['id'] == first.get_json()['id']

        fetched = client.get('/api/settings/templates/quote', headers=auth_headers).get_json()
        assert fetched['settings'] == {'margin': 8}

    def test_types_are_independent(self, client, auth_headers):
        client.put('/api/settings/templates/quote', json={'settings': {'a': 1}}, headers=auth_headers)
        assert client.get('/api/settings/templates/receipt', headers=auth_headers).get_json() is None

    def test_settings_must_be_object(self, client, auth_headers):
        response = client.put('/api/settings/templates/quote', json={'settings': 'plain'}, headers=auth_headers)
        assert response.status_code == 400
