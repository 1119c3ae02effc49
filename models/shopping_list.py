# models/shopping_list.py

from datetime import datetime, timezone

OBJECTIVES = {
    'emagrecimento': 'Emagrecimento',
    'ganho de massa': 'Ganho de Massa Muscular',
    'manutencao': 'Manutenção de Peso',
    'saude geral': 'Saúde Geral',
}

TIME_PERIODS = {
    '1 dia': '1 Dia',
    '7 dias': '7 Dias',
    '30 dias': '30 Dias',
}

GENDERS = {
    'masculino': 'Masculino',
    'feminino': 'Feminino',
}

PERSON_FIELDS = ('gender', 'weight', 'height', 'age', 'tmb')
REQUIRED_PERSON_FIELDS = ('gender', 'weight', 'height', 'age')


class Person:
    """One person a shopping list or list-based meal plan is sized for"""

    @staticmethod
    def empty():
        return {field: '' for field in PERSON_FIELDS}

    @staticmethod
    def normalize(person):
        return {field: str(person.get(field) or '').strip() for field in PERSON_FIELDS}

    @staticmethod
    def validate(person, index):
        missing = [field for field in REQUIRED_PERSON_FIELDS if not str(person.get(field) or '').strip()]
        if missing:
            return [f'Dados incompletos para a Pessoa {index + 1}: preencha gênero, peso, altura e idade.']
        return []

    @staticmethod
    def from_form(form):
        """Rebuild the people list from parallel form fields (gender, weight, ...)"""
        columns = {field: form.getlist(field) for field in PERSON_FIELDS}
        count = max((len(values) for values in columns.values()), default=0)
        people = []
        for i in range(count):
            people.append({
                field: (columns[field][i] if i < len(columns[field]) else '').strip()
                for field in PERSON_FIELDS
            })
        return people or [Person.empty()]


class ShoppingList:
    """Shopping list generated by the AI, optionally with a meal plan built from it"""

    @staticmethod
    def _validate_context(data):
        errors = []
        if not str(data.get('objective') or '').strip():
            errors.append('Por favor, selecione o objetivo principal.')
        if not str(data.get('timePeriod') or '').strip():
            errors.append('Por favor, selecione o período de tempo.')

        people = data.get('people')
        if not isinstance(people, list) or not people:
            errors.append('Informe ao menos uma pessoa.')
            return errors
        for index, person in enumerate(people):
            if not isinstance(person, dict):
                errors.append(f'Dados incompletos para a Pessoa {index + 1}.')
                continue
            errors.extend(Person.validate(person, index))
        return errors

    @staticmethod
    def validate_request(data):
        """Validate the payload sent to the shopping list generator"""
        return ShoppingList._validate_context(data)

    @staticmethod
    def validate_meal_plan_request(data):
        """Validate the payload sent to the list-based meal plan generator"""
        errors = []
        shopping_list = data.get('shoppingList')
        if not isinstance(shopping_list, dict) or not isinstance(shopping_list.get('lista_de_compras'), list):
            errors.append('Gere uma lista de compras antes de montar o plano alimentar.')
        errors.extend(ShoppingList._validate_context(data))
        return errors

    @staticmethod
    def create_shopping_list(list_details, request_data, user_id):
        return {
            'user_id': user_id,
            'created_at': datetime.now(timezone.utc),
            'objective': request_data['objective'],
            'time_period': request_data['timePeriod'],
            'people': [Person.normalize(person) for person in request_data['people']],
            'list_details': list_details,
            'meal_plan': None,
        }

    @staticmethod
    def count_items(list_details):
        categories = (list_details or {}).get('lista_de_compras') or []
        return sum(len(category.get('itens') or []) for category in categories)
