# LangGraph Workflow Definition

from graph.state import CaseState, initial_state
from graph.workflow import create_case_workflow, compile_workflow

__all__ = ["CaseState", "initial_state", "create_case_workflow", "compile_workflow"]
