"""LLM model resolution for complexity scoring.

Providers:
- openai: hosted model, requires OPENAI_API_KEY
- test: pydantic_ai TestModel, offline and deterministic (local runs, tests)
"""

import os

from pydantic_ai.models.openai import OpenAIModel
from pydantic_ai.models.test import TestModel

from worklog_engine.config.settings import settings

SUPPORTED_PROVIDERS = ("openai", "test")


def get_model(provider: str, model_name: str):
    """Resolve a pydantic_ai model for the given provider.

    Raises:
        ValueError: If the provider is not supported
    """
    provider = provider.strip().lower()

    if provider == "openai":
        # pydantic_ai reads the key from the environment
        if settings.openai_api_key and not os.getenv("OPENAI_API_KEY"):
            os.environ["OPENAI_API_KEY"] = settings.openai_api_key
        return OpenAIModel(model_name)

    if provider == "test":
        return TestModel()

    raise ValueError(f"Unsupported LLM provider: {provider}. Supported: {', '.join(SUPPORTED_PROVIDERS)}")
