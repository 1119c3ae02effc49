# utils/response_parser.py

"""
Best-effort cleanup of model output.

Gemini sometimes wraps its JSON in markdown fences or adds a sentence
before or after the object. ``parse_json_response`` strips the fences,
tries a direct ``json.loads`` and then falls back to the outermost
``{...}`` span before giving up.
"""

import json
import logging
import re

logger = logging.getLogger(__name__)

CODE_FENCE_RE = re.compile(r'```(?:json)?', re.IGNORECASE)
JSON_OBJECT_RE = re.compile(r'\{.*\}', re.DOTALL)


class ResponseParseError(ValueError):
    """Raised when the model output cannot be turned into the expected JSON"""


def clean_response_text(text):
    """Remove markdown code fences and surrounding whitespace"""
    return CODE_FENCE_RE.sub('', text or '').strip()


def parse_json_response(text):
    cleaned_text = clean_response_text(text)
    if not cleaned_text:
        raise ResponseParseError('Empty response from model')

    try:
        data = json.loads(cleaned_text)
    except json.JSONDecodeError as e:
        match = JSON_OBJECT_RE.search(cleaned_text)
        if not match:
            raise ResponseParseError(f'No JSON object found in response: {e}') from e
        logger.warning("Direct JSON parsing failed, retrying with extracted object")
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError as inner:
            raise ResponseParseError(f'JSON parsing failed: {inner}') from inner

    if not isinstance(data, dict):
        raise ResponseParseError('Expected a JSON object at the top level')
    return data


def _require_list(data, key):
    value = data.get(key)
    if not isinstance(value, list) or not value:
        raise ResponseParseError(f"Missing or empty '{key}' list")
    return value


def _require_dict_with(item, keys, context):
    if not isinstance(item, dict):
        raise ResponseParseError(f'{context} must be an object')
    for key in keys:
        if key not in item:
            raise ResponseParseError(f"{context} is missing '{key}'")


def validate_nutrition_plan(plan):
    """Check the ``{"meals": [{"type", "foods": [...]}]}`` structure"""
    for meal in _require_list(plan, 'meals'):
        _require_dict_with(meal, ('type', 'foods'), 'Meal')
        if not isinstance(meal['foods'], list):
            raise ResponseParseError("Meal 'foods' must be a list")
        for food in meal['foods']:
            _require_dict_with(food, ('name',), 'Food')
    return plan


def validate_shopping_list(shopping_list):
    for category in _require_list(shopping_list, 'lista_de_compras'):
        _require_dict_with(category, ('categoria', 'itens'), 'Category')
        if not isinstance(category['itens'], list):
            raise ResponseParseError("Category 'itens' must be a list")
        for item in category['itens']:
            _require_dict_with(item, ('item',), 'Item')
    return shopping_list


def validate_meal_plan(meal_plan):
    for person_plan in _require_list(meal_plan, 'planos_alimentares'):
        _require_dict_with(person_plan, ('pessoa', 'plano_diario'), 'Person plan')
        if not isinstance(person_plan['plano_diario'], list):
            raise ResponseParseError("'plano_diario' must be a list")
        for day in person_plan['plano_diario']:
            _require_dict_with(day, ('dia', 'refeicoes'), 'Day')
    return meal_plan
