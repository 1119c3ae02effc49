# utils/__init__.py

"""
Utilities package for the NutriPlan application.
"""

from .ai_meal_generator import AIGenerationError, AIMealGenerator
from .response_parser import ResponseParseError, parse_json_response

__all__ = ['AIGenerationError', 'AIMealGenerator', 'ResponseParseError', 'parse_json_response']
