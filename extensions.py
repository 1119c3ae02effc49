# extensions.py

from flask import current_app
from flask_pymongo import PyMongo

from utils.ai_meal_generator import AIMealGenerator

mongo = PyMongo()
ai_generator = AIMealGenerator()


def get_generator():
    """The generator registered on the current app (tests swap in a stub)"""
    return current_app.extensions['ai_generator']
