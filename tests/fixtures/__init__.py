"""Test fixture package for sitecms.

Contains fixtures for:
- In-memory content store and render cache fakes
- SQLite-backed content store
- Local object store and mocked HTTP origins
- The FastAPI test application
"""
