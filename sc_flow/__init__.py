"""
Top-level package for the single-cell flow browser.

This package exposes the core architecture (domain, views, UI adapters).
Most code should import from submodules such as:
    sc_flow.core
    sc_flow.views
    sc_flow.ui
"""

__all__: list[str] = []
