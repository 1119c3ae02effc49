# utils/formatting.py

"""
Display helpers shared by the templates, the chart and the PDF export.
"""

import math
import re
from datetime import datetime

from models.plan import MACRO_PRIORITIES, MEAL_TYPES
from models.shopping_list import GENDERS, OBJECTIVES, TIME_PERIODS, ShoppingList

NUMBER_RE = re.compile(r'\d+(?:[.,]\d+)?')

MONTH_ABBREVIATIONS = ['jan', 'fev', 'mar', 'abr', 'mai', 'jun',
                       'jul', 'ago', 'set', 'out', 'nov', 'dez']
MONTH_NAMES = ['janeiro', 'fevereiro', 'março', 'abril', 'maio', 'junho',
               'julho', 'agosto', 'setembro', 'outubro', 'novembro', 'dezembro']


def _to_datetime(value):
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            return None
    return None


def format_date(value, with_time=False):
    """dd/mm/yyyy (optionally with HH:MM); "Nunca" when missing"""
    if value is None or value == '':
        return 'Nunca'
    date = _to_datetime(value)
    if date is None:
        return 'Data inválida'
    if with_time:
        return date.strftime('%d/%m/%Y %H:%M')
    return date.strftime('%d/%m/%Y')


def format_datetime(value):
    return format_date(value, with_time=True)


def format_short_date(value):
    date = _to_datetime(value)
    if date is None:
        return ''
    return f"{date.day:02d}/{MONTH_ABBREVIATIONS[date.month - 1]}"


def format_long_date(value):
    date = _to_datetime(value)
    if date is None:
        return 'Data inválida'
    return f"{date.day:02d} de {MONTH_NAMES[date.month - 1]} de {date.year}"


def to_number(value):
    """Calories from the model may arrive as numbers or strings like "350 kcal" or "350-400 kcal"."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else 0
    if isinstance(value, str):
        # First number wins: ranges count as their lower bound
        match = NUMBER_RE.search(value)
        if not match:
            return 0
        number = match.group(0).replace(',', '.')
        return float(number) if '.' in number else int(number)
    return 0


def meal_calories(meal):
    return sum(to_number(food.get('calories')) for food in meal.get('foods') or [])


def plan_total_calories(plan_details):
    return sum(meal_calories(meal) for meal in (plan_details or {}).get('meals') or [])


def meal_type_label(value):
    return MEAL_TYPES.get(value, value or '')


def macro_label(value):
    return MACRO_PRIORITIES.get(value, value or '')


def objective_label(value):
    return OBJECTIVES.get(value, value or '')


def time_period_label(value):
    return TIME_PERIODS.get(value, value or '')


def gender_label(value):
    return GENDERS.get(value, value or '')


def shopping_list_text(list_details):
    """Plain-text rendering: "Categoria:\\n- 2kg de Arroz" blocks separated by blank lines"""
    blocks = []
    for category in (list_details or {}).get('lista_de_compras') or []:
        lines = [f"{category.get('categoria', '')}:"]
        for item in category.get('itens') or []:
            lines.append(f"- {item.get('quantidade', '')} de {item.get('item', '')}")
        blocks.append('\n'.join(lines))
    return '\n\n'.join(blocks)


def register_filters(app):
    app.jinja_env.filters.update({
        'date': format_date,
        'datetime': format_datetime,
        'long_date': format_long_date,
        'meal_type': meal_type_label,
        'macro': macro_label,
        'objective': objective_label,
        'time_period': time_period_label,
        'gender': gender_label,
        'meal_calories': meal_calories,
        'plan_calories': plan_total_calories,
        'item_count': ShoppingList.count_items,
        'shopping_text': shopping_list_text,
    })
