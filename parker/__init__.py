"""
Parker - fixed-capacity parking lot simulator

Vehicles are always given the lowest free slot; departures free the slot
and are charged by the hour.
"""

__version__ = "1.0.0"
