import json
from datetime import datetime

from bson import ObjectId

from models.plan import Plan

from conftest import SAMPLE_PLAN


def plan_form(patient, **overrides):
    data = {
        'patient_id': str(patient['_id']),
        'foods': ['Arroz', 'Frango'],
        'custom_foods': 'Quinoa',
        'meal_type': 'all',
        'max_calories': '1800',
        'macro_priority': 'protein',
        'observations': 'Intolerância à lactose',
    }
    data.update(overrides)
    return data


def insert_plan(db, user, patient):
    details = Plan.build_details(SAMPLE_PLAN, {
        'patientName': patient['name'], 'maxCalories': 1800, 'mealType': 'all',
        'macroPriority': 'protein', 'selectedFoods': ['Arroz'],
    })
    document = Plan.create_plan(details, patient['_id'], user['_id'])
    document['_id'] = db.plans.insert_one(document).inserted_id
    return document


def test_plan_form_lists_patients_and_foods(auth_client, patient):
    html = auth_client.get('/plans/new').get_data(as_text=True)
    assert 'Maria Silva' in html
    assert 'Pão integral' in html


def test_plan_form_preselects_patient(auth_client, patient):
    html = auth_client.get(f"/plans/new?patient_id={patient['_id']}").get_data(as_text=True)
    assert f'name="patient_id" value="{patient["_id"]}"' in html


def test_generate_and_save_plan(auth_client, db, generator, user, patient):
    response = auth_client.post('/plans/new', data=plan_form(patient))

    assert response.status_code == 302
    plan = db.plans.find_one({'patient_id': patient['_id']})
    assert response.headers['Location'].endswith(f"/plans/{plan['_id']}")
    assert plan['user_id'] == user['_id']

    details = plan['plan_details']
    assert details['meals'] == SAMPLE_PLAN['meals']
    assert details['patientName'] == 'Maria Silva'
    assert details['maxCalories'] == 1800
    assert details['foods'] == ['Arroz', 'Frango', 'Quinoa']

    _, kwargs = generator.calls[0]
    assert kwargs['selected_foods'] == ['Arroz', 'Frango', 'Quinoa']
    assert kwargs['observations'] == 'Intolerância à lactose'


def test_plan_validation_errors(auth_client, db, generator, patient):
    response = auth_client.post('/plans/new', data=plan_form(patient, foods=[], custom_foods='', max_calories=''))

    html = response.get_data(as_text=True)
    assert response.status_code == 400
    assert 'Selecione ao menos um alimento disponível.' in html
    assert 'Informe as calorias máximas.' in html
    assert generator.calls == []
    assert db.plans.count_documents({}) == 0


def test_plan_requires_an_owned_patient(auth_client, generator, patient):
    response = auth_client.post('/plans/new', data=plan_form(patient, patient_id=str(ObjectId())))
    assert response.status_code == 400
    assert 'Selecione um paciente.' in response.get_data(as_text=True)


def test_plan_generation_failure_keeps_form(auth_client, db, generator, patient):
    from utils.ai_meal_generator import AIGenerationError

    generator.error = AIGenerationError('Gemini API key is not configured')
    response = auth_client.post('/plans/new', data=plan_form(patient))

    html = response.get_data(as_text=True)
    assert response.status_code == 500
    assert 'Erro ao gerar plano' in html
    assert 'Intolerância à lactose' in html
    assert db.plans.count_documents({}) == 0


def test_plan_list_and_detail(auth_client, db, user, patient):
    plan = insert_plan(db, user, patient)

    html = auth_client.get('/plans').get_data(as_text=True)
    assert 'Maria Silva' in html

    response = auth_client.get(f"/plans/{plan['_id']}")
    html = response.get_data(as_text=True)
    assert response.status_code == 200
    assert 'Pão integral' in html
    assert '680' in html


def test_plan_of_another_user_is_not_found(auth_client, db, other_user, patient):
    plan = insert_plan(db, other_user, patient)
    assert auth_client.get(f"/plans/{plan['_id']}").status_code == 404
    assert auth_client.get(f"/plans/{plan['_id']}/pdf").status_code == 404


def test_edit_plan(auth_client, db, user, patient):
    plan = insert_plan(db, user, patient)
    url = f"/plans/{plan['_id']}/edit"

    html = auth_client.get(url).get_data(as_text=True)
    assert '&#34;meals&#34;' in html or '&quot;meals&quot;' in html

    edited = dict(plan['plan_details'], meals=[{'type': 'dinner', 'foods': [{'name': 'Sopa', 'calories': 300}]}])
    response = auth_client.post(url, data={'plan_details': json.dumps(edited)})
    assert response.status_code == 302
    saved = db.plans.find_one({'_id': plan['_id']})['plan_details']
    assert saved['meals'][0]['type'] == 'dinner'
    assert saved['patientName'] == 'Maria Silva'


def test_edit_plan_rejects_invalid_json(auth_client, db, user, patient):
    plan = insert_plan(db, user, patient)
    response = auth_client.post(f"/plans/{plan['_id']}/edit", data={'plan_details': '{"meals": '})

    assert response.status_code == 400
    assert 'Plano inválido' in response.get_data(as_text=True)
    assert db.plans.find_one({'_id': plan['_id']})['plan_details']['meals'] == SAMPLE_PLAN['meals']


def test_delete_plan(auth_client, db, user, patient):
    plan = insert_plan(db, user, patient)
    response = auth_client.post(f"/plans/{plan['_id']}/delete", data={'next': f"/patients/{patient['_id']}"})

    assert response.headers['Location'].endswith(f"/patients/{patient['_id']}")
    assert db.plans.count_documents({}) == 0


def test_plan_pdf(auth_client, db, user, patient):
    plan = insert_plan(db, user, patient)
    response = auth_client.get(f"/plans/{plan['_id']}/pdf")

    assert response.status_code == 200
    assert response.mimetype == 'application/pdf'
    assert response.data.startswith(b'%PDF')


def test_plans_show_on_patient_history(auth_client, db, user, patient):
    plan = insert_plan(db, user, patient)
    db.plans.update_one({'_id': plan['_id']}, {'$set': {'created_at': datetime(2024, 4, 2)}})

    html = auth_client.get(f"/patients/{patient['_id']}").get_data(as_text=True)
    assert 'Plano de 02/04/2024' in html


def test_plan_pdf_after_free_form_edit(auth_client, db, user, patient):
    plan = insert_plan(db, user, patient)
    edited = dict(plan['plan_details'], foods=['Arroz', 2, None], maxCalories='1800')
    auth_client.post(f"/plans/{plan['_id']}/edit", data={'plan_details': json.dumps(edited)})

    response = auth_client.get(f"/plans/{plan['_id']}/pdf")
    assert response.status_code == 200
    assert response.data.startswith(b'%PDF')
