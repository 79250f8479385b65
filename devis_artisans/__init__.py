"""
Devis Artisans : persistance locale des clients, devis et prestations.
"""

__version__ = "1.0.0"
