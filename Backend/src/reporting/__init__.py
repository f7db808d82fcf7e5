"""
Reporting module for printable first-aid instruction sheets.
"""

from .instruction_sheet import InstructionSheetGenerator

__all__ = ['InstructionSheetGenerator']
