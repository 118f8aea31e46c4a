"""
Services package initialization.
"""

from learnhub.services.provider_repository import AIProviderRepository, get_provider_repository
from learnhub.services.ai_gateway import AIGatewayService, calculate_cost, get_ai_gateway
from learnhub.services.json_repair import ResponseRepairPipeline, repair_json
from learnhub.services.content_generator import AIContentGeneratorService, get_content_generator
from learnhub.services.quiz_generation import QuizGenerationService, get_quiz_generator

__all__ = [
    "AIProviderRepository",
    "get_provider_repository",
    "AIGatewayService",
    "calculate_cost",
    "get_ai_gateway",
    "ResponseRepairPipeline",
    "repair_json",
    "AIContentGeneratorService",
    "get_content_generator",
    "QuizGenerationService",
    "get_quiz_generator",
]
