"""
MediaParser.

Media filename parsing with rule-based extraction, AI fallback and
pattern learning from user corrections.
"""

__version__ = '1.0.0'
