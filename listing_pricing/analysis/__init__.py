"""Analysis sessions: encode, split, tune, refit and evaluate."""

from .models import AnalysisConfig, AnalysisReport, SessionResult
from .session import AnalysisSession

__all__ = [
    "AnalysisSession",
    "AnalysisConfig",
    "AnalysisReport",
    "SessionResult",
]
