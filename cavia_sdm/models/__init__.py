"""
Suitability models: the model interface, the MaxEnt implementation,
prediction and evaluation helpers.
"""

from .core.base import SuitabilityModel
from .core.evaluation import ModelEvaluation, roc_from_scores, evaluate_model
from .core.prediction import predict_surface, suitability_change, summarise_surface
from .maxent import MaxentSuitabilityModel

__all__ = [
    'SuitabilityModel',
    'ModelEvaluation',
    'roc_from_scores',
    'evaluate_model',
    'predict_surface',
    'suitability_change',
    'summarise_surface',
    'MaxentSuitabilityModel',
]
