"""Bookstore API - Core Application Package

This package contains the core application modules including:
- API endpoints (api.py)
- Request handlers (handlers.py)
- Input validation (validators.py)
- CLI interface (main.py)
- Data models (book.py)
- Database layer (database.py)
"""

__version__ = "1.0.0"
