"""
Pytest configuration and fixtures
"""
import copy
from datetime import datetime

import mongomock
import pytest

from app import create_app
from config import TestingConfig
from extensions import mongo
from models.user import User

SAMPLE_PLAN = {
    "meals": [
        {
            "type": "breakfast",
            "foods": [
                {"name": "Ovos", "quantity": "2 unidades", "calories": 140},
                {"name": "Pão integral", "quantity": "2 fatias", "calories": 160},
            ],
        },
        {
            "type": "lunch",
            "foods": [
                {"name": "Arroz", "quantity": "100g", "calories": 130},
                {"name": "Frango", "quantity": "150g", "calories": "250 kcal"},
            ],
        },
    ]
}

SAMPLE_SHOPPING_LIST = {
    "lista_de_compras": [
        {
            "categoria": "Grãos e Cereais",
            "itens": [
                {"item": "Arroz", "quantidade": "2kg"},
                {"item": "Feijão", "quantidade": "1kg"},
            ],
        },
        {
            "categoria": "Proteínas",
            "itens": [{"item": "Frango", "quantidade": "1,5kg"}],
        },
    ],
    "observacoes": "Congele o frango em porções.",
}

SAMPLE_MEAL_PLAN = {
    "planos_alimentares": [
        {
            "pessoa": "Pessoa 1",
            "descricao_pessoa": "Gênero masculino, 70kg, 175cm, 30 anos",
            "objetivo_individual": "Perder peso com segurança.",
            "plano_diario": [
                {
                    "dia": "Dia 1",
                    "total_calorias_aproximadas": 1800,
                    "refeicoes": [
                        {"nome": "Almoço", "descricao": "Arroz, feijão e frango", "calorias_aproximadas": 650}
                    ],
                }
            ],
        }
    ]
}

PERSON = {"gender": "masculino", "weight": "70", "height": "175", "age": "30", "tmb": "1800"}


class StubGenerator:
    """Stands in for AIMealGenerator; records calls and returns canned JSON"""

    def __init__(self):
        self.calls = []
        self.error = None

    def _respond(self, name, kwargs, result):
        self.calls.append((name, kwargs))
        if self.error is not None:
            raise self.error
        return copy.deepcopy(result)

    def generate_nutrition_plan(self, **kwargs):
        return self._respond('nutrition_plan', kwargs, SAMPLE_PLAN)

    def generate_shopping_list(self, **kwargs):
        return self._respond('shopping_list', kwargs, SAMPLE_SHOPPING_LIST)

    def generate_meal_plan_from_list(self, **kwargs):
        return self._respond('meal_plan_from_list', kwargs, SAMPLE_MEAL_PLAN)


@pytest.fixture
def app(monkeypatch):
    app = create_app(TestingConfig)
    monkeypatch.setattr(mongo, 'db', mongomock.MongoClient().db)
    app.extensions['ai_generator'] = StubGenerator()
    yield app


@pytest.fixture
def db(app):
    return mongo.db


@pytest.fixture
def generator(app):
    return app.extensions['ai_generator']


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(db, email='nutri@example.com', password='secret123'):
    document = User.create_user(email, password)
    document['_id'] = db.users.insert_one(document).inserted_id
    return document


@pytest.fixture
def user(db):
    return make_user(db)


@pytest.fixture
def other_user(db):
    return make_user(db, email='outra@example.com')


@pytest.fixture
def auth_client(client, user):
    with client.session_transaction() as sess:
        sess['user_id'] = str(user['_id'])
    return client


@pytest.fixture
def patient(db, user):
    document = {
        'user_id': user['_id'],
        'name': 'Maria Silva',
        'email': 'maria@example.com',
        'phone': None,
        'status': 'active',
        'created_at': datetime(2024, 3, 5, 10, 30),
    }
    document['_id'] = db.patients.insert_one(document).inserted_id
    return document
