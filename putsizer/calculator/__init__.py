"""End-to-end protective put calculation."""
from .protective_put_calculator import CalculationResult, ProtectivePutCalculator, SizingRequest

__all__ = ['CalculationResult', 'ProtectivePutCalculator', 'SizingRequest']
