from src.models.token import AnalysisResult, KeyMetrics, TokenMetrics, Verdict

__all__ = [
    "AnalysisResult",
    "KeyMetrics",
    "TokenMetrics",
    "Verdict",
]
