# models/__init__.py

"""
Models package for the NutriPlan application.

Each model is a small schema helper: ``create_*`` builds the MongoDB
document and ``validate*`` returns a list of user-facing error messages.
"""

from .user import User
from .patient import Patient
from .patient_metric import PatientMetric
from .plan import Plan
from .shopping_list import Person, ShoppingList

__all__ = ['User', 'Patient', 'PatientMetric', 'Plan', 'Person', 'ShoppingList']
