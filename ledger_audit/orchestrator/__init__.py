"""Analysis orchestration"""

from .analysis_orchestrator import AnalysisOrchestrator

__all__ = ["AnalysisOrchestrator"]
