"""
Hotel Booking Engine
Room inventory lookup and reservation lifecycle with overlap-free allocation
"""

__version__ = "1.0.0"
