"""
elfkit Output Module
=====================

Console display and report generation for decoded ELF images.
"""

from elfkit.output.console import ElfConsoleOutput
from elfkit.output.report import ElfReportGenerator

__all__ = [
    "ElfConsoleOutput",
    "ElfReportGenerator",
]
