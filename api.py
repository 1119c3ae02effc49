# api.py

"""
JSON endpoints that forward form data to Gemini.

Each handler validates the body, builds the prompt through the generator
and returns the parsed JSON. Any failure after validation is reported as
a generic 500 with an ``error`` message.
"""

import logging

from flask import Blueprint, jsonify, request

from auth import login_required
from extensions import get_generator
from models.plan import Plan
from models.shopping_list import ShoppingList

logger = logging.getLogger(__name__)

bp = Blueprint('api', __name__, url_prefix='/api')


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


def _bad_request(errors):
    return jsonify({'error': 'Invalid request', 'details': errors}), 400


@bp.route('/generate-plan', methods=['POST'])
@login_required
def generate_plan():
    data = _json_body()
    if data is None:
        return _bad_request(['Request body must be a JSON object.'])
    errors = Plan.validate_request(data)
    if errors:
        return _bad_request(errors)

    try:
        plan = get_generator().generate_nutrition_plan(
            patient_name=data['patientName'],
            max_calories=data['maxCalories'],
            meal_type=data['mealType'],
            macro_priority=data['macroPriority'],
            selected_foods=data['selectedFoods'],
            observations=data.get('observations', ''),
        )
    except Exception:
        logger.exception("Error generating nutrition plan")
        return jsonify({'error': 'Failed to generate nutrition plan'}), 500
    return jsonify(plan)


@bp.route('/generate-shopping-list', methods=['POST'])
@login_required
def generate_shopping_list():
    data = _json_body()
    if data is None:
        return _bad_request(['Request body must be a JSON object.'])
    errors = ShoppingList.validate_request(data)
    if errors:
        return _bad_request(errors)

    try:
        shopping_list = get_generator().generate_shopping_list(
            objective=data['objective'],
            people=data['people'],
            time_period=data['timePeriod'],
        )
    except Exception:
        logger.exception("Error generating shopping list")
        return jsonify({'error': 'Failed to generate shopping list'}), 500
    return jsonify(shopping_list)


@bp.route('/generate-meal-plan-from-list', methods=['POST'])
@login_required
def generate_meal_plan_from_list():
    data = _json_body()
    if data is None:
        return _bad_request(['Request body must be a JSON object.'])
    errors = ShoppingList.validate_meal_plan_request(data)
    if errors:
        return _bad_request(errors)

    try:
        meal_plan = get_generator().generate_meal_plan_from_list(
            shopping_list=data['shoppingList'],
            people=data['people'],
            time_period=data['timePeriod'],
            objective=data['objective'],
        )
    except Exception:
        logger.exception("Error generating meal plan")
        return jsonify({'error': 'Failed to generate meal plan'}), 500
    return jsonify(meal_plan)
