"""
FrontDesk dialer: prospect ranking and outbound-call automation.
"""

__version__ = "0.1.0"
