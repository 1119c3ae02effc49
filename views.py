# views.py

import io
import json
import logging
import re

from flask import (
    Blueprint,
    Response,
    abort,
    flash,
    g,
    redirect,
    render_template,
    request,
    send_file,
    url_for,
)
from bson import ObjectId
from pymongo import ASCENDING, DESCENDING

from auth import login_required
from extensions import get_generator, mongo
from models.patient import Patient
from models.patient_metric import PatientMetric
from models.plan import COMMON_FOODS, MACRO_PRIORITIES, MEAL_TYPES, Plan, merge_foods
from models.shopping_list import GENDERS, OBJECTIVES, TIME_PERIODS, Person, ShoppingList
from utils.ai_meal_generator import AIGenerationError
from utils.charts import render_metrics_chart
from utils.pdf_export import build_plan_pdf, build_shopping_list_pdf
from utils.response_parser import ResponseParseError, parse_json_response, validate_nutrition_plan

logger = logging.getLogger(__name__)

bp = Blueprint('main', __name__)


def mongo_object_id(value):
    """ObjectId from a form/query string, None when blank or malformed"""
    if value and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def _next_url(default):
    next_url = request.form.get('next')
    if next_url and next_url.startswith('/') and not next_url.startswith('//'):
        return next_url
    return default


def _find_owned(collection, object_id):
    """Fetch a document owned by the current user or abort with 404"""
    document = mongo.db[collection].find_one({'_id': object_id, 'user_id': g.user['_id']})
    if document is None:
        abort(404)
    return document


def _flash_errors(errors):
    for error in errors:
        flash(error, 'error')


def _patient_names(plans):
    ids = list({plan['patient_id'] for plan in plans if plan.get('patient_id')})
    if not ids:
        return {}
    patients = mongo.db.patients.find({'_id': {'$in': ids}, 'user_id': g.user['_id']}, {'name': 1})
    return {patient['_id']: patient['name'] for patient in patients}


# ✅ Dashboard
@bp.route('/')
@login_required
def index():
    user_id = g.user['_id']
    stats = {
        'active_patients': mongo.db.patients.count_documents({'user_id': user_id, 'status': 'active'}),
        'plans_created': mongo.db.plans.count_documents({'user_id': user_id}),
        'shopping_lists': mongo.db.shopping_lists.count_documents({'user_id': user_id}),
    }
    recent_plans = list(mongo.db.plans.find({'user_id': user_id}).sort('created_at', DESCENDING).limit(5))
    return render_template('dashboard.html', stats=stats, recent_plans=recent_plans,
                           patient_names=_patient_names(recent_plans))


# ✅ Patients
@bp.route('/patients')
@login_required
def patients():
    query = {'user_id': g.user['_id']}
    search = (request.args.get('q') or '').strip()
    if search:
        pattern = {'$regex': re.escape(search), '$options': 'i'}
        query['$or'] = [{'name': pattern}, {'email': pattern}]
    patient_list = list(mongo.db.patients.find(query).sort('created_at', DESCENDING))
    return render_template('patients/list.html', patients=patient_list, search=search)


@bp.route('/patients', methods=['POST'])
@login_required
def create_patient():
    errors = Patient.validate(request.form)
    if errors:
        _flash_errors(errors)
        patient_list = list(mongo.db.patients.find({'user_id': g.user['_id']}).sort('created_at', DESCENDING))
        return render_template('patients/list.html', patients=patient_list, search='',
                               form=request.form), 400

    result = mongo.db.patients.insert_one(Patient.create_patient(request.form, g.user['_id']))
    logger.info("Created patient %s", result.inserted_id)
    flash('Paciente adicionado com sucesso!', 'success')
    return redirect(url_for('main.patients'))


@bp.route('/patients/<ObjectId:patient_id>')
@login_required
def patient_detail(patient_id):
    patient = _find_owned('patients', patient_id)
    metrics = list(mongo.db.patient_metrics.find({'patient_id': patient_id}).sort('metric_date', ASCENDING))
    plans = list(mongo.db.plans.find({'patient_id': patient_id}).sort('created_at', DESCENDING))
    latest_metric = PatientMetric.latest(metrics)
    return render_template(
        'patients/detail.html',
        patient=patient,
        metrics=metrics,
        latest_metric=latest_metric,
        default_height=latest_metric.get('height') if latest_metric else None,
        plans=plans,
    )


@bp.route('/patients/<ObjectId:patient_id>/status', methods=['POST'])
@login_required
def toggle_patient_status(patient_id):
    patient = _find_owned('patients', patient_id)
    mongo.db.patients.update_one({'_id': patient_id}, {'$set': {'status': Patient.toggled_status(patient)}})
    flash('Status do paciente atualizado.', 'success')
    return redirect(_next_url(url_for('main.patient_detail', patient_id=patient_id)))


@bp.route('/patients/<ObjectId:patient_id>/delete', methods=['POST'])
@login_required
def delete_patient(patient_id):
    _find_owned('patients', patient_id)
    mongo.db.patient_metrics.delete_many({'patient_id': patient_id})
    mongo.db.plans.delete_many({'patient_id': patient_id})
    mongo.db.patients.delete_one({'_id': patient_id})
    logger.info("Deleted patient %s with metrics and plans", patient_id)
    flash('Paciente removido.', 'success')
    return redirect(url_for('main.patients'))


@bp.route('/patients/<ObjectId:patient_id>/metrics', methods=['POST'])
@login_required
def add_metric(patient_id):
    _find_owned('patients', patient_id)
    errors = PatientMetric.validate(request.form)
    if errors:
        _flash_errors(errors)
        return redirect(url_for('main.patient_detail', patient_id=patient_id))

    mongo.db.patient_metrics.insert_one(PatientMetric.create_metric(request.form, patient_id, g.user['_id']))
    flash('Nova medição salva.', 'success')
    return redirect(url_for('main.patient_detail', patient_id=patient_id))


@bp.route('/patients/<ObjectId:patient_id>/chart.png')
@login_required
def metrics_chart(patient_id):
    _find_owned('patients', patient_id)
    metrics = list(mongo.db.patient_metrics.find({'patient_id': patient_id}).sort('metric_date', ASCENDING))
    if len(metrics) < 2:
        abort(404)
    return Response(render_metrics_chart(metrics), mimetype='image/png')


# ✅ Nutrition plans
def _plan_form_context(selected_patient=None, form=None):
    return {
        'patients': list(mongo.db.patients.find({'user_id': g.user['_id']}, {'name': 1}).sort('name', ASCENDING)),
        'selected_patient': selected_patient,
        'common_foods': COMMON_FOODS,
        'meal_types': MEAL_TYPES,
        'macro_priorities': MACRO_PRIORITIES,
        'form': form or {},
    }


@bp.route('/plans/new', methods=['GET', 'POST'])
@login_required
def new_plan():
    if request.method == 'GET':
        patient_id = request.args.get('patient_id', type=mongo_object_id)
        patient = _find_owned('patients', patient_id) if patient_id else None
        return render_template('plans/form.html', **_plan_form_context(patient))

    patient_id = mongo_object_id(request.form.get('patient_id'))
    patient = None
    if patient_id:
        patient = mongo.db.patients.find_one({'_id': patient_id, 'user_id': g.user['_id']})

    foods = merge_foods(request.form.getlist('foods'), request.form.get('custom_foods', ''))
    plan_request = {
        'patientName': patient['name'] if patient else '',
        'maxCalories': request.form.get('max_calories', ''),
        'mealType': request.form.get('meal_type'),
        'macroPriority': request.form.get('macro_priority'),
        'selectedFoods': foods,
        'observations': request.form.get('observations', ''),
    }
    form = dict(request.form, foods=foods)

    errors = Plan.validate_request(plan_request)
    if errors:
        _flash_errors(errors)
        return render_template('plans/form.html', **_plan_form_context(patient, form)), 400

    try:
        ai_plan = get_generator().generate_nutrition_plan(
            patient_name=plan_request['patientName'],
            max_calories=plan_request['maxCalories'],
            meal_type=plan_request['mealType'],
            macro_priority=plan_request['macroPriority'],
            selected_foods=plan_request['selectedFoods'],
            observations=plan_request['observations'],
        )
    except (AIGenerationError, ResponseParseError) as e:
        logger.error("Error generating nutrition plan: %s", e)
        flash('Erro ao gerar plano: ocorreu um erro ao se comunicar com a IA. Tente novamente.', 'error')
        return render_template('plans/form.html', **_plan_form_context(patient, form)), 500

    details = Plan.build_details(ai_plan, plan_request)
    result = mongo.db.plans.insert_one(Plan.create_plan(details, patient['_id'], g.user['_id']))
    logger.info("Saved plan %s for patient %s", result.inserted_id, patient['_id'])
    flash('Plano salvo com sucesso!', 'success')
    return redirect(url_for('main.plan_detail', plan_id=result.inserted_id))


@bp.route('/plans')
@login_required
def plans():
    plan_list = list(mongo.db.plans.find({'user_id': g.user['_id']}).sort('created_at', DESCENDING))
    return render_template('plans/list.html', plans=plan_list, patient_names=_patient_names(plan_list))


@bp.route('/plans/<ObjectId:plan_id>')
@login_required
def plan_detail(plan_id):
    plan = _find_owned('plans', plan_id)
    return render_template('plans/detail.html', plan=plan, details=plan['plan_details'])


@bp.route('/plans/<ObjectId:plan_id>/edit', methods=['GET', 'POST'])
@login_required
def edit_plan(plan_id):
    plan = _find_owned('plans', plan_id)
    if request.method == 'POST':
        raw = request.form.get('plan_details', '')
        try:
            details = validate_nutrition_plan(parse_json_response(raw))
        except ResponseParseError as e:
            flash(f'Plano inválido: {e}', 'error')
            return render_template('plans/edit.html', plan=plan, raw=raw), 400

        mongo.db.plans.update_one({'_id': plan_id}, {'$set': {'plan_details': details}})
        flash('Plano alimentar atualizado.', 'success')
        return redirect(url_for('main.plan_detail', plan_id=plan_id))

    raw = json.dumps(plan['plan_details'], indent=2, ensure_ascii=False, default=str)
    return render_template('plans/edit.html', plan=plan, raw=raw)


@bp.route('/plans/<ObjectId:plan_id>/delete', methods=['POST'])
@login_required
def delete_plan(plan_id):
    _find_owned('plans', plan_id)
    mongo.db.plans.delete_one({'_id': plan_id})
    flash('Plano deletado com sucesso!', 'success')
    return redirect(_next_url(url_for('main.plans')))


@bp.route('/plans/<ObjectId:plan_id>/pdf')
@login_required
def plan_pdf(plan_id):
    plan = _find_owned('plans', plan_id)
    return send_file(
        io.BytesIO(build_plan_pdf(plan['plan_details'])),
        mimetype='application/pdf',
        as_attachment=True,
        download_name=f'plano-{plan_id}.pdf',
    )


# ✅ Shopping lists
def _shopping_form_context(form, people):
    return {
        'form': form,
        'people': people,
        'objectives': OBJECTIVES,
        'time_periods': TIME_PERIODS,
        'genders': GENDERS,
    }


@bp.route('/shopping-lists/new', methods=['GET', 'POST'])
@login_required
def new_shopping_list():
    if request.method == 'GET':
        return render_template('shopping/form.html', **_shopping_form_context({}, [Person.empty()]))

    people = Person.from_form(request.form)
    action = request.form.get('action', 'generate')
    if action == 'add_person':
        people.append(Person.empty())
        return render_template('shopping/form.html', **_shopping_form_context(request.form, people))
    if action.startswith('remove_person:'):
        index = action.split(':', 1)[1]
        index = int(index) if index.isdigit() else -1
        if len(people) > 1 and 0 <= index < len(people):
            people.pop(index)
        return render_template('shopping/form.html', **_shopping_form_context(request.form, people))

    list_request = {
        'objective': request.form.get('objective', ''),
        'timePeriod': request.form.get('time_period', ''),
        'people': people,
    }
    errors = ShoppingList.validate_request(list_request)
    if errors:
        _flash_errors(errors)
        return render_template('shopping/form.html', **_shopping_form_context(request.form, people)), 400

    try:
        list_details = get_generator().generate_shopping_list(
            objective=list_request['objective'],
            people=people,
            time_period=list_request['timePeriod'],
        )
    except (AIGenerationError, ResponseParseError) as e:
        logger.error("Error generating shopping list: %s", e)
        flash('Erro ao gerar lista de compras: ocorreu um erro ao se comunicar com a IA. Tente novamente.',
              'error')
        return render_template('shopping/form.html', **_shopping_form_context(request.form, people)), 500

    document = ShoppingList.create_shopping_list(list_details, list_request, g.user['_id'])
    result = mongo.db.shopping_lists.insert_one(document)
    logger.info("Saved shopping list %s", result.inserted_id)
    flash('Lista de Compras Gerada e Salva! Agora você pode gerar um plano alimentar com base na lista.',
          'success')
    return redirect(url_for('main.shopping_list_detail', list_id=result.inserted_id))


@bp.route('/shopping-lists')
@login_required
def shopping_lists():
    lists = list(mongo.db.shopping_lists.find({'user_id': g.user['_id']}).sort('created_at', DESCENDING))
    return render_template('shopping/history.html', lists=lists)


@bp.route('/shopping-lists/<ObjectId:list_id>')
@login_required
def shopping_list_detail(list_id):
    shopping_list = _find_owned('shopping_lists', list_id)
    return render_template('shopping/detail.html', shopping_list=shopping_list)


@bp.route('/shopping-lists/<ObjectId:list_id>/meal-plan', methods=['POST'])
@login_required
def generate_list_meal_plan(list_id):
    shopping_list = _find_owned('shopping_lists', list_id)
    try:
        meal_plan = get_generator().generate_meal_plan_from_list(
            shopping_list=shopping_list['list_details'],
            people=shopping_list['people'],
            time_period=shopping_list['time_period'],
            objective=shopping_list['objective'],
        )
    except (AIGenerationError, ResponseParseError) as e:
        logger.error("Error generating meal plan from list %s: %s", list_id, e)
        flash('Erro ao gerar plano alimentar. Tente novamente.', 'error')
        return render_template('shopping/detail.html', shopping_list=shopping_list), 500

    mongo.db.shopping_lists.update_one({'_id': list_id}, {'$set': {'meal_plan': meal_plan}})
    flash('Plano Alimentar Gerado! Seu plano alimentar personalizado está pronto.', 'success')
    return redirect(url_for('main.shopping_list_detail', list_id=list_id))


@bp.route('/shopping-lists/<ObjectId:list_id>/delete', methods=['POST'])
@login_required
def delete_shopping_list(list_id):
    _find_owned('shopping_lists', list_id)
    mongo.db.shopping_lists.delete_one({'_id': list_id})
    flash('Lista de compras removida.', 'success')
    return redirect(url_for('main.shopping_lists'))


@bp.route('/shopping-lists/<ObjectId:list_id>/pdf')
@login_required
def shopping_list_pdf(list_id):
    shopping_list = _find_owned('shopping_lists', list_id)
    return send_file(
        io.BytesIO(build_shopping_list_pdf(shopping_list)),
        mimetype='application/pdf',
        as_attachment=True,
        download_name=f'lista-de-compras-{list_id}.pdf',
    )
