# functions/__init__.py
"""Privileged server functions, served by FastAPI.

Run: uvicorn functions.app:app --port 8000 (from repo root)
"""
