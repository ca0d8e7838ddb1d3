# Text Generator
# Gemini chat model behind a single generate(prompt) call

from typing import Optional

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from config import GOOGLE_API_KEY, LLM_MODEL, LLM_TEMPERATURE
from errors import GenerationError
from utils.logger import log_error, log_llm_call, log_llm_result


class GeminiTextGenerator:
    """
    Wraps the Gemini chat model.

    Any failure (network, quota, safety block, empty response) is raised as
    GenerationError. There are no retries.
    """

    def __init__(
        self,
        api_key: str = GOOGLE_API_KEY,
        model: str = LLM_MODEL,
        temperature: float = LLM_TEMPERATURE,
        llm=None,
    ):
        self.model = model
        self.temperature = temperature
        self.llm = llm or ChatGoogleGenerativeAI(
            model=model,
            google_api_key=api_key,
            temperature=temperature,
        )

    def generate(self, prompt: str, system_prompt: Optional[str] = None, agent_name: str = "text_generator") -> str:
        """
        Generate text for a prompt.

        Args:
            prompt: The user prompt
            system_prompt: Optional system instruction
            agent_name: Caller name, for logging

        Returns:
            The model's text response
        """
        messages = []
        if system_prompt:
            messages.append(SystemMessage(content=system_prompt))
        messages.append(HumanMessage(content=prompt))

        log_llm_call(agent_name, prompt)
        try:
            response = self.llm.invoke(messages)
        except Exception as e:
            log_error(f"{agent_name} generation failed", e)
            raise GenerationError(f"Text generation failed: {e}", cause=e) from e

        text = _content_text(response.content)
        if not text.strip():
            raise GenerationError("Text generation returned an empty response")

        log_llm_result(agent_name, text)
        return text


def _content_text(content) -> str:
    """Chat content is either a string or a list of parts."""
    if isinstance(content, str):
        return content
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)
