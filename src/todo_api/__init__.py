"""
Todo service package.

A FastAPI application exposing CRUD operations over a single collection of
todo items stored in MongoDB. Build the app with `todo_api.main.create_app`
or run it with `python -m todo_api`.
"""

__version__ = "0.1.0"
