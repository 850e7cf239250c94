"""
Grammergen: evolves approximate grammars from example strings.
"""

__version__ = "0.1.0"
