from conftest import PERSON, SAMPLE_MEAL_PLAN, SAMPLE_PLAN, SAMPLE_SHOPPING_LIST

PLAN_REQUEST = {
    "patientName": "Maria Silva",
    "maxCalories": 1800,
    "mealType": "all",
    "macroPriority": "protein",
    "selectedFoods": ["Arroz", "Frango", "Ovos"],
}

LIST_REQUEST = {"objective": "emagrecimento", "timePeriod": "7 dias", "people": [PERSON]}


def test_api_requires_login(client):
    response = client.post('/api/generate-plan', json=PLAN_REQUEST)
    assert response.status_code == 401
    assert response.get_json() == {'error': 'Authentication required'}


def test_get_is_method_not_allowed(auth_client):
    for path in ('/api/generate-plan', '/api/generate-shopping-list', '/api/generate-meal-plan-from-list'):
        response = auth_client.get(path)
        assert response.status_code == 405
        assert response.get_json() == {'error': 'Method not allowed'}


def test_unknown_api_route_is_json_404(auth_client):
    response = auth_client.post('/api/generate-everything', json={})
    assert response.status_code == 404
    assert response.get_json() == {'error': 'Not found'}


def test_generate_plan(auth_client, generator):
    response = auth_client.post('/api/generate-plan', json=dict(PLAN_REQUEST, observations='sem glúten'))

    assert response.status_code == 200
    assert response.get_json() == SAMPLE_PLAN
    name, kwargs = generator.calls[0]
    assert name == 'nutrition_plan'
    assert kwargs['patient_name'] == 'Maria Silva'
    assert kwargs['selected_foods'] == ["Arroz", "Frango", "Ovos"]
    assert kwargs['observations'] == 'sem glúten'


def test_generate_plan_rejects_invalid_body(auth_client, generator):
    response = auth_client.post('/api/generate-plan', json=dict(PLAN_REQUEST, selectedFoods=[]))

    assert response.status_code == 400
    body = response.get_json()
    assert body['error'] == 'Invalid request'
    assert body['details'] == ['Selecione ao menos um alimento disponível.']
    assert generator.calls == []


def test_non_json_body_is_rejected(auth_client):
    response = auth_client.post('/api/generate-shopping-list', data='objective=x',
                                content_type='application/x-www-form-urlencoded')
    assert response.status_code == 400


def test_generate_plan_failure(auth_client, generator):
    generator.error = RuntimeError('boom')
    response = auth_client.post('/api/generate-plan', json=PLAN_REQUEST)

    assert response.status_code == 500
    assert response.get_json() == {'error': 'Failed to generate nutrition plan'}


def test_generate_shopping_list(auth_client, generator):
    response = auth_client.post('/api/generate-shopping-list', json=LIST_REQUEST)

    assert response.status_code == 200
    assert response.get_json() == SAMPLE_SHOPPING_LIST
    assert generator.calls[0][1] == {'objective': 'emagrecimento', 'people': [PERSON], 'time_period': '7 dias'}


def test_generate_shopping_list_reports_incomplete_person(auth_client):
    response = auth_client.post('/api/generate-shopping-list',
                                json=dict(LIST_REQUEST, people=[dict(PERSON, weight='')]))
    assert response.status_code == 400
    assert 'Pessoa 1' in response.get_json()['details'][0]


def test_generate_shopping_list_failure(auth_client, generator):
    generator.error = ValueError('bad json')
    response = auth_client.post('/api/generate-shopping-list', json=LIST_REQUEST)

    assert response.status_code == 500
    assert response.get_json() == {'error': 'Failed to generate shopping list'}


def test_generate_meal_plan_from_list(auth_client, generator):
    response = auth_client.post('/api/generate-meal-plan-from-list',
                                json=dict(LIST_REQUEST, shoppingList=SAMPLE_SHOPPING_LIST))

    assert response.status_code == 200
    assert response.get_json() == SAMPLE_MEAL_PLAN
    name, kwargs = generator.calls[0]
    assert name == 'meal_plan_from_list'
    assert kwargs['shopping_list'] == SAMPLE_SHOPPING_LIST


def test_meal_plan_requires_shopping_list(auth_client, generator):
    response = auth_client.post('/api/generate-meal-plan-from-list', json=LIST_REQUEST)
    assert response.status_code == 400
    assert generator.calls == []


def test_meal_plan_failure(auth_client, generator):
    generator.error = RuntimeError('timeout')
    response = auth_client.post('/api/generate-meal-plan-from-list',
                                json=dict(LIST_REQUEST, shoppingList=SAMPLE_SHOPPING_LIST))

    assert response.status_code == 500
    assert response.get_json() == {'error': 'Failed to generate meal plan'}


def test_generate_plan_rejects_non_text_foods(auth_client, generator):
    response = auth_client.post('/api/generate-plan', json=dict(PLAN_REQUEST, selectedFoods=[1, "Arroz"]))

    assert response.status_code == 400
    assert response.get_json()['details'] == ['Os alimentos devem ser informados como texto.']
    assert generator.calls == []
