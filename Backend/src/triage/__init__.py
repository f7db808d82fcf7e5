"""
Injury Triage Module
Signal parsing, keyword scoring, classification and first-aid step generation.
"""

from .assembler import InstructionBundle
from .classifier import ClassificationResult
from .errors import MalformedSignal, UpstreamUnavailable
from .pipeline import InjuryTriagePipeline
from .signal import DetectionSignal, ViolenceLikelihood

__all__ = [
    'InjuryTriagePipeline', 'InstructionBundle', 'ClassificationResult', 'DetectionSignal',
    'ViolenceLikelihood', 'UpstreamUnavailable', 'MalformedSignal',
]
