"""
VoyageAI - planer podróży: trasa, mapa i plan wygenerowany przez model językowy.
"""

__version__ = "1.0.0"
