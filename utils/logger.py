# Logger Utility
# Console logging for workflow nodes, record store / tracking calls and LLM calls

import logging
import sys
from datetime import datetime

from config import LOG_COLOR, LOG_LEVEL

logger = logging.getLogger("CaseDashboard")

LEVEL_STYLES = {
    "DEBUG": ("\033[36m", "🔍"),
    "INFO": ("\033[32m", "✅"),
    "WARNING": ("\033[33m", "⚠️"),
    "ERROR": ("\033[31m", "❌"),
    "CRITICAL": ("\033[35m", "🔥"),
}
RESET = "\033[0m"


class ColoredFormatter(logging.Formatter):
    """Short time-stamped lines, colored per level when writing to a terminal."""

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record):
        color, emoji = LEVEL_STYLES.get(record.levelname, ("", ""))
        stamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"[{stamp}] {emoji} {record.levelname}: {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        if not self.use_color or not color:
            return line
        return f"{color}{line}{RESET}"


def configure_logging(level: str = LOG_LEVEL, stream=None) -> logging.Logger:
    """
    Attach the console handler once and set the level.

    Args:
        level: Level name, e.g. "INFO"
        stream: Output stream, stdout by default

    Returns:
        The dashboard logger
    """
    stream = stream or sys.stdout
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    if not logger.handlers:
        handler = logging.StreamHandler(stream)
        use_color = LOG_COLOR and hasattr(stream, "isatty") and stream.isatty()
        handler.setFormatter(ColoredFormatter(use_color))
        logger.addHandler(handler)
        logger.propagate = False
    return logger


configure_logging()


def _preview(value, limit: int) -> str:
    text = str(value)
    return text[:limit] + "..." if len(text) > limit else text


def _tree(items: dict, limit: int = 100):
    for key, value in items.items():
        if value is not None:
            logger.debug(f"   └─ {key}: {_preview(value, limit)}")


def log_node_start(node_name: str, **kwargs):
    """Log when a workflow node starts."""
    logger.info(f"🚀 NODE START: {node_name}")
    _tree(kwargs)


def log_node_end(node_name: str, result: dict = None):
    """Log when a workflow node ends."""
    logger.info(f"🏁 NODE END: {node_name}")
    _tree(result or {})


def log_api_call(service: str, operation: str, params: dict = None):
    """Log calls to external services (record store, tracking provider)."""
    logger.info(f"🔧 API CALL: {service}.{operation}")
    _tree(params or {})


def log_api_result(service: str, operation: str, success: bool, data_summary: str = None):
    outcome = "ok" if success else "failed"
    log = logger.info if success else logger.error
    log(f"📦 API RESULT: {service}.{operation} {outcome}")
    if data_summary:
        logger.debug(f"   └─ {data_summary}")


def log_llm_call(agent_name: str, prompt_preview: str = None):
    logger.info(f"🤖 LLM CALL: {agent_name}")
    if prompt_preview:
        _tree({"prompt": prompt_preview}, 200)


def log_llm_result(agent_name: str, response_preview: str = None):
    logger.info(f"💬 LLM RESULT: {agent_name}")
    if response_preview:
        _tree({"response": response_preview}, 200)


def log_error(message: str, error: Exception = None):
    """Log a handled failure with the exception type, without a traceback."""
    logger.error(f"❌ {message}")
    if error is not None:
        logger.error(f"   └─ {type(error).__name__}: {error}")


def log_workflow_start(case_id: str, action: str, live_tracking: bool):
    """Log when the case workflow starts."""
    logger.info("=" * 60)
    logger.info(f"📨 CASE WORKFLOW: {action} {case_id}")
    if live_tracking:
        logger.info("   └─ with live tracking lookup")


def log_workflow_end(success: bool, summary: str = None):
    """Log when the case workflow ends."""
    if success:
        logger.info(f"✅ CASE WORKFLOW DONE ({summary})" if summary else "✅ CASE WORKFLOW DONE")
    else:
        logger.error(f"❌ CASE WORKFLOW FAILED: {summary}" if summary else "❌ CASE WORKFLOW FAILED")
    logger.info("=" * 60)
