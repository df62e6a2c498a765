from .analysis import AnalysisResult, AnalysisShape, ShapeFailure, ShapeReport

__all__ = [
    "AnalysisShape",
    "AnalysisResult",
    "ShapeFailure",
    "ShapeReport",
]
