"""
Menubot daily-menu chat service.

The package scrapes configured lunch menu pages, aggregates them per weekday and answers
"menu" / "menu tomorrow" chat queries through the messaging connector API.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
