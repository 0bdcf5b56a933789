"""
Tools: availability
"""

from weekly_availability.tools.availability import availability

__all__ = ["availability"]
