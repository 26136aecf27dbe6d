"""
Top-level package for the department sheets console.

This package exposes the core architecture (domain, services, UI adapters).
Most code should import from submodules such as:
    sheets_console.core
    sheets_console.services
    sheets_console.ui
"""

__all__: list[str] = []
