"""
MaxEnt model functionality for SDM.
"""

from .maxent_model import MaxentSuitabilityModel

__all__ = [
    'MaxentSuitabilityModel',
]
