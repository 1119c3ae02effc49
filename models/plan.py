# models/plan.py

from datetime import datetime, timezone

COMMON_FOODS = [
    'Arroz',
    'Feijão',
    'Frango',
    'Ovos',
    'Leite',
    'Banana',
    'Maçã',
    'Brócolis',
    'Batata',
    'Pão integral',
    'Aveia',
    'Salmão',
    'Tomate',
    'Alface',
    'Cenoura',
]

MEAL_TYPES = {
    'breakfast': 'Café da manhã',
    'lunch': 'Almoço',
    'dinner': 'Jantar',
    'snack': 'Lanche',
    'all': 'Todas as refeições do dia',
}

MACRO_PRIORITIES = {
    'balanced': 'Equilibrado',
    'carbs': 'Carboidratos',
    'protein': 'Proteínas',
    'fats': 'Gorduras',
    'fiber': 'Fibras',
}


def merge_foods(selected, custom=''):
    """Combine checked foods with comma/newline separated custom foods, keeping order"""
    foods = []
    candidates = list(selected or [])
    candidates.extend(custom.replace('\n', ',').split(',') if custom else [])
    for food in candidates:
        food = (food or '').strip()
        if food and food not in foods:
            foods.append(food)
    return foods


class Plan:
    """Nutrition plan generated by the AI for one patient"""

    @staticmethod
    def validate_request(data):
        """Validate the payload sent to the plan generator"""
        errors = []
        if not str(data.get('patientName') or '').strip():
            errors.append('Selecione um paciente.')

        max_calories = data.get('maxCalories')
        try:
            if int(str(max_calories).strip()) <= 0:
                errors.append('Calorias máximas devem ser maiores que zero.')
        except (TypeError, ValueError):
            errors.append('Informe as calorias máximas.')

        if data.get('mealType') not in MEAL_TYPES:
            errors.append('Selecione o tipo de refeição.')
        if data.get('macroPriority') not in MACRO_PRIORITIES:
            errors.append('Selecione a prioridade nutricional.')

        foods = data.get('selectedFoods')
        if not isinstance(foods, list) or not [f for f in foods if isinstance(f, str) and f.strip()]:
            errors.append('Selecione ao menos um alimento disponível.')
        elif not all(isinstance(f, str) for f in foods):
            errors.append('Os alimentos devem ser informados como texto.')
        return errors

    @staticmethod
    def build_details(ai_plan, request_data):
        """Merge the AI output with the parameters used to request it"""
        details = dict(ai_plan)
        details.update({
            'patientName': request_data['patientName'].strip(),
            'maxCalories': int(str(request_data['maxCalories']).strip()),
            'mealType': request_data['mealType'],
            'macroPriority': request_data['macroPriority'],
            'foods': list(request_data['selectedFoods']),
            'observations': (request_data.get('observations') or '').strip(),
            'generatedAt': datetime.now(timezone.utc).isoformat(),
        })
        return details

    @staticmethod
    def create_plan(plan_details, patient_id, user_id):
        return {
            'user_id': user_id,
            'patient_id': patient_id,
            'plan_details': plan_details,
            'created_at': datetime.now(timezone.utc),
        }
