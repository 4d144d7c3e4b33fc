"""
Briefcase Module

Assembles the "briefcase" - the structured project context Claude answers from.
Contains assistant instructions, the change-proposal grammar and project data.
"""

from .assembler import BriefcaseAssembler, format_money
from .templates import BriefcaseTemplates

__all__ = ["BriefcaseAssembler", "BriefcaseTemplates", "format_money"]
