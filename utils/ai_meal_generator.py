# utils/ai_meal_generator.py

import logging

import google.generativeai as genai
from google.generativeai.types import HarmBlockThreshold, HarmCategory

from config import Config
from utils import prompts
from utils.response_parser import (
    parse_json_response,
    validate_meal_plan,
    validate_nutrition_plan,
    validate_shopping_list,
)

logger = logging.getLogger(__name__)

HARASSMENT_SAFETY = {
    HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
}

FULL_SAFETY = {
    HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
}


class AIGenerationError(Exception):
    """Raised when Gemini is unavailable or returns no usable text"""


class AIMealGenerator:
    """Nutrition plan and shopping list generator using Google Gemini"""

    def __init__(self, app=None):
        self.initialized = False
        self.model_name = Config.GEMINI_MODEL
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        api_key = app.config.get('GEMINI_API_KEY')
        self.model_name = app.config.get('GEMINI_MODEL') or Config.GEMINI_MODEL
        if api_key:
            genai.configure(api_key=api_key)
            self.initialized = True
            logger.info("AI generator initialized with model %s", self.model_name)
        else:
            logger.warning("No Gemini API key found. AI features are disabled.")
            self.initialized = False
        app.extensions['ai_generator'] = self

    def generate_nutrition_plan(self, patient_name, max_calories, meal_type, macro_priority,
                                selected_foods, observations=''):
        """Generate a single-patient plan: {"meals": [...]}"""
        prompt = prompts.build_nutrition_plan_prompt(
            patient_name, max_calories, meal_type, macro_priority, selected_foods, observations
        )
        response_text = self._generate(
            prompt,
            genai.types.GenerationConfig(
                temperature=0.9,
                top_k=1,
                top_p=1,
                max_output_tokens=2048,
            ),
            HARASSMENT_SAFETY,
        )
        return validate_nutrition_plan(parse_json_response(response_text))

    def generate_shopping_list(self, objective, people, time_period):
        """Generate a categorized list: {"lista_de_compras": [...], "observacoes": ...}"""
        prompt = prompts.build_shopping_list_prompt(objective, people, time_period)
        response_text = self._generate(
            prompt,
            genai.types.GenerationConfig(
                temperature=0.7,
                top_k=1,
                top_p=1,
                max_output_tokens=8192,
                response_mime_type='application/json',
            ),
            FULL_SAFETY,
            system_instruction=prompts.SHOPPING_LIST_INSTRUCTION,
        )
        return validate_shopping_list(parse_json_response(response_text))

    def generate_meal_plan_from_list(self, shopping_list, people, time_period, objective):
        """Generate per-person plans that only use the list items: {"planos_alimentares": [...]}"""
        prompt = prompts.build_meal_plan_from_list_prompt(shopping_list, people, time_period, objective)
        response_text = self._generate(
            prompt,
            genai.types.GenerationConfig(
                temperature=0.8,
                top_k=1,
                top_p=1,
                max_output_tokens=8192,
                response_mime_type='application/json',
            ),
            FULL_SAFETY,
            system_instruction=prompts.MEAL_PLAN_FROM_LIST_INSTRUCTION,
        )
        return validate_meal_plan(parse_json_response(response_text))

    def _generate(self, prompt, generation_config, safety_settings, system_instruction=None):
        if not self.initialized:
            raise AIGenerationError("Gemini API key is not configured")

        model = genai.GenerativeModel(self.model_name, system_instruction=system_instruction)
        logger.debug("Sending prompt to Gemini:\n%s", prompt)
        try:
            response = model.generate_content(
                prompt,
                generation_config=generation_config,
                safety_settings=safety_settings,
            )
        except Exception as e:
            raise AIGenerationError(f"Gemini generation error: {type(e).__name__}: {e}") from e

        response_text = self._extract_text(response)
        if not response_text:
            raise AIGenerationError("No text extracted from Gemini response")

        logger.info("Gemini response preview: %s...", response_text[:200])
        return response_text

    @staticmethod
    def _extract_text(response):
        """Concatenate the text parts of every candidate, falling back to response.text"""
        response_text = ""
        for candidate in getattr(response, 'candidates', None) or []:
            content = getattr(candidate, 'content', None)
            for part in getattr(content, 'parts', None) or []:
                response_text += getattr(part, 'text', '') or ''

        if not response_text:
            try:
                response_text = getattr(response, 'text', '') or ''
            except ValueError:
                # Raised by the SDK when the response holds no simple text part
                logger.warning("Gemini response has no text part")
        return response_text
