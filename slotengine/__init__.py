"""
slotengine - bookable time windows for service providers.
"""

__version__ = "0.1.0"
