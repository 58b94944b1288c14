"""
语言模块 / Language module.
"""

from DiscordNexus.lang.keys import TranslationKeys
from DiscordNexus.lang.language import Language

__all__ = ["Language", "TranslationKeys"]
