from sqlalchemy.exc import OperationalError

from models import Recipe, RecipeMaterial
from services.recipe_store import RecipeStore


def _create(client, payload):
    resp = client.post('/api/items', json=payload)
    assert resp.status_code == 201
    return resp.get_json()['id']


def test_health(client):
    resp = client.get('/health')
    assert resp.status_code == 200
    assert resp.get_data(as_text=True) == 'OK'


def test_create_and_fetch_recipe(client, sword_payload):
    resp = client.post('/api/items', json=sword_payload)
    assert resp.status_code == 201
    body = resp.get_json()
    assert body['id'] == 1
    assert body['message']

    resp = client.get('/api/items/1/recipe')
    assert resp.status_code == 200
    assert resp.get_json() == {
        'id': 1,
        'name': 'Sword',
        'quantity_produced': 1,
        'npc_sell_price': 50,
        'materials': [
            {'material_name': 'Iron', 'quantity': 3, 'material_type': 'ore', 'default_npc_price': 5},
        ],
    }


def test_list_items(client, sword_payload):
    _create(client, sword_payload)
    _create(client, dict(sword_payload, name='Axe', npc_sell_price=30))
    resp = client.get('/api/items')
    assert resp.status_code == 200
    data = resp.get_json()
    assert [item['name'] for item in data] == ['Axe', 'Sword']
    assert data[0] == {'id': 2, 'name': 'Axe', 'npc_sell_price': 30}


def test_price_by_name(client, sword_payload):
    _create(client, sword_payload)
    resp = client.get('/api/items/name/Sword')
    assert resp.status_code == 200
    assert resp.get_json() == {'npc_sell_price': 50}

    resp = client.get('/api/items/name/Bow')
    assert resp.status_code == 404


def test_price_by_name_with_spaces(client, sword_payload):
    _create(client, dict(sword_payload, name='Iron Sword', npc_sell_price=75))
    resp = client.get('/api/items/name/Iron%20Sword')
    assert resp.status_code == 200
    assert resp.get_json()['npc_sell_price'] == 75


def test_create_validation_errors(client, sword_payload):
    resp = client.post('/api/items', json=dict(sword_payload, materials=[]))
    assert resp.status_code == 400
    assert 'materials' in resp.get_json()['error']

    resp = client.post('/api/items', json=dict(sword_payload, name=''))
    assert resp.status_code == 400

    resp = client.post('/api/items', json=dict(sword_payload, npc_sell_price=-1))
    assert resp.status_code == 400

    resp = client.post('/api/items', data='not json', content_type='application/json')
    assert resp.status_code == 400

    resp = client.post('/api/items', json=['Sword'])
    assert resp.status_code == 400

    assert Recipe.query.count() == 0


def test_invalid_ids_are_rejected(client, sword_payload):
    assert client.get('/api/items/abc/recipe').status_code == 400
    assert client.put('/api/items/abc', json=sword_payload).status_code == 400
    assert client.delete('/api/items/abc').status_code == 400


def test_unknown_ids_are_not_found(client, sword_payload):
    assert client.get('/api/items/99/recipe').status_code == 404
    assert client.put('/api/items/99', json=sword_payload).status_code == 404
    assert client.delete('/api/items/99').status_code == 404


def test_update_item(client, sword_payload):
    recipe_id = _create(client, sword_payload)
    update = dict(sword_payload, npc_sell_price=60, materials=[
        {'material_name': 'Steel', 'quantity': 2, 'material_type': 'ingot', 'default_npc_price': 20},
    ])
    resp = client.put(f'/api/items/{recipe_id}', json=update)
    assert resp.status_code == 200
    assert resp.get_json()['id'] == recipe_id

    recipe = client.get(f'/api/items/{recipe_id}/recipe').get_json()
    assert recipe['npc_sell_price'] == 60
    assert [m['material_name'] for m in recipe['materials']] == ['Steel']


def test_update_with_empty_materials_is_rejected(client, sword_payload):
    recipe_id = _create(client, sword_payload)
    resp = client.put(f'/api/items/{recipe_id}', json=dict(sword_payload, npc_sell_price=60, materials=[]))
    assert resp.status_code == 400
    assert client.get('/api/items/name/Sword').get_json()['npc_sell_price'] == 50


def test_delete_item(client, sword_payload):
    recipe_id = _create(client, sword_payload)
    resp = client.delete(f'/api/items/{recipe_id}')
    assert resp.status_code == 200
    assert resp.get_json()['message']

    assert client.get(f'/api/items/{recipe_id}/recipe').status_code == 404
    assert RecipeMaterial.query.count() == 0


def test_storage_failure_returns_generic_500(client, monkeypatch, sword_payload):
    def broken_insert(self, recipe_id, material):
        raise OperationalError('INSERT INTO recipe_materials', {}, Exception('database is locked'))

    monkeypatch.setattr(RecipeStore, '_insert_material', broken_insert)
    resp = client.post('/api/items', json=sword_payload)
    assert resp.status_code == 500
    error = resp.get_json()['error']
    assert 'locked' not in error
    assert 'INSERT' not in error
    assert Recipe.query.count() == 0


def test_cors_headers_on_api(client):
    resp = client.get('/api/items', headers={'Origin': 'http://localhost:5173'})
    assert resp.status_code == 200
    assert resp.headers.get('Access-Control-Allow-Origin') == '*'


def test_oversized_quantity_is_a_bad_request(client, sword_payload):
    resp = client.post('/api/items', json=dict(sword_payload, quantity_produced=10**20))
    assert resp.status_code == 400
    assert 'quantity_produced' in resp.get_json()['error']

    # The session is still usable after the rejected write
    assert client.post('/api/items', json=sword_payload).status_code == 201
    assert Recipe.query.count() == 1


def test_oversized_path_id_is_a_bad_request(client):
    assert client.get(f'/api/items/{10**20}/recipe').status_code == 400
    assert client.delete(f'/api/items/{10**20}').status_code == 400


def test_non_plain_ids_are_rejected(client, sword_payload):
    _create(client, sword_payload)
    for raw_id in ('0_1', '%201', '1%20', '%D9%A1', '+1', '1.0'):
        assert client.get(f'/api/items/{raw_id}/recipe').status_code == 400, raw_id


def test_negative_id_is_not_found(client):
    assert client.get('/api/items/-1/recipe').status_code == 404


def test_unicode_names_are_not_escaped(client, sword_payload):
    _create(client, dict(sword_payload, name='Espada é'))
    resp = client.get('/api/items')
    assert 'Espada é' in resp.get_data(as_text=True)
    assert '\\u00e9' not in resp.get_data(as_text=True)


def test_whole_prices_render_without_decimals(client, sword_payload):
    _create(client, sword_payload)
    body = client.get('/api/items/1/recipe').get_data(as_text=True)
    assert '50.0' not in body
    assert client.get('/api/items/1/recipe').get_json()['npc_sell_price'] == 50
