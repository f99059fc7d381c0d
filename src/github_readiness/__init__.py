"""GitHub Readiness MCP Server.

Score a GitHub profile for recruiter readiness — documentation, consistency,
impact, and best practices — with strengths, red flags, and recommendations.
"""

__version__ = "0.1.0"

from .core.models import AnalysisResult, ProfileBundle
from .core.scoring import calculate_score

__all__ = ["AnalysisResult", "ProfileBundle", "calculate_score"]
