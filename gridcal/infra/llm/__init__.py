from gridcal.infra.llm.base import LLMAPIError, LLMClient
from gridcal.infra.llm.openai_client import OpenAIAPIError, OpenAIClient

__all__ = ["LLMAPIError", "LLMClient", "OpenAIAPIError", "OpenAIClient"]
