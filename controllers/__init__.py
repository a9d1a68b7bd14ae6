# controllers/__init__.py
"""Page controllers: plain functions taking (session, caller, ...) and returning dicts."""
