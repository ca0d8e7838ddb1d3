# LLM JSON Responses
# Models often wrap JSON in markdown code fences; strip them before parsing

import json
from typing import Any


def strip_code_fences(content: str) -> str:
    if "```json" in content:
        return content.split("```json")[1].split("```")[0].strip()
    if "```" in content:
        return content.split("```")[1].split("```")[0].strip()
    return content.strip()


def parse_json_response(content: str) -> Any:
    """
    Raises:
        ValueError: If the content is not valid JSON (json.JSONDecodeError is a ValueError).
    """
    return json.loads(strip_code_fences(content))
