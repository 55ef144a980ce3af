"""Side Stats: analytics, server health and CI stats service"""

__version__ = "1.0.0"
