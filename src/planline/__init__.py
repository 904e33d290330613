"""
Planline - Project timeline planning engine

This package contains the Planline day-estimate engine:
- estimates: Day estimate computation (working calendar, planned time,
  milestone segmentation, segment allocation, orchestration)
- platform: Cross-cutting concerns (configuration, logging)
"""

__version__ = "0.1.0"
