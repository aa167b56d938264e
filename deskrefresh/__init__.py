"""
Desktop Refresh - keeps a desktop session refreshed by replaying a short
keyboard and mouse sequence on a timer.
"""

__version__ = "0.1.0"
