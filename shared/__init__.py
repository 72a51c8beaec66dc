"""
elfkit Shared Module
=====================

Configuration, structured logging and console utilities shared across the
elfkit decoder and its front ends.
"""

from shared.config import ElfkitConfig, get_config

__all__ = ["ElfkitConfig", "get_config"]
