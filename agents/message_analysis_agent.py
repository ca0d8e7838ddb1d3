# MessageAnalysisAgent
# Classifies an inbound customer message into issue category, sentiment and urgency.
# Used when a case is created; never blocks case creation.

from typing import Any, Dict

from config import ISSUE_CATEGORIES, SENTIMENTS, URGENCIES
from errors import GenerationError
from prompts.prompts import ANALYSIS_SYSTEM_PROMPT, ANALYSIS_USER_PROMPT
from utils.json_response import parse_json_response
from utils.logger import log_error, logger


DEFAULT_ANALYSIS = {
    "issue_category": "Other",
    "sentiment": "Neutral",
    "urgency": "Medium",
    "suggested_actions": [],
}


def _quoted(values) -> str:
    return ", ".join(f'"{v}"' for v in values)


class MessageAnalysisAgent:
    """
    Agent responsible for triaging a customer message with the LLM.
    Any failure falls back to Other / Neutral / Medium with no suggested actions.
    """

    def __init__(self, generator):
        self.generator = generator

    def analyze(self, message: str) -> Dict[str, Any]:
        """
        Args:
            message: The customer's original message

        Returns:
            {"issue_category", "sentiment", "urgency", "suggested_actions"}
        """
        if self.generator is None:
            logger.info("📌 No LLM configured, using default message analysis")
            return dict(DEFAULT_ANALYSIS)

        prompt = ANALYSIS_USER_PROMPT.format(
            issue_categories=_quoted(ISSUE_CATEGORIES),
            sentiments=_quoted(SENTIMENTS),
            urgencies=_quoted(URGENCIES),
            message=message,
        )
        try:
            content = self.generator.generate(
                prompt, system_prompt=ANALYSIS_SYSTEM_PROMPT, agent_name="message_analysis"
            )
            data = parse_json_response(content)
        except (GenerationError, ValueError) as e:
            log_error("Message analysis failed, using defaults", e)
            return dict(DEFAULT_ANALYSIS)

        if not isinstance(data, dict):
            logger.warning("⚠️ Message analysis returned non-object JSON, using defaults")
            return dict(DEFAULT_ANALYSIS)
        return self._validate(data)

    def _validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Keep only whitelisted values; anything else falls back to the default."""
        category = data.get("issueCategory")
        sentiment = data.get("sentiment")
        urgency = data.get("urgency")
        actions = data.get("suggestedActions")
        return {
            "issue_category": category if category in ISSUE_CATEGORIES else DEFAULT_ANALYSIS["issue_category"],
            "sentiment": sentiment if sentiment in SENTIMENTS else DEFAULT_ANALYSIS["sentiment"],
            "urgency": urgency if urgency in URGENCIES else DEFAULT_ANALYSIS["urgency"],
            "suggested_actions": [str(a) for a in actions] if isinstance(actions, list) else [],
        }
