"""
Countdown 1356 - bộ đếm ngược bền vững 1356 ngày.
"""

__version__ = "1.0.0"
