"""
Top-level package for the Library API.

All functionality lives in submodules under ``app``; import them with
fully qualified names such as ``library_api.app.main``.
"""

__all__ = []
