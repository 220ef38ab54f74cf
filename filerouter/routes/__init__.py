"""
Route modules served by filerouter.

Every module here (except __init__.py) exports ``router = RouteBuilder(...)``
and is mounted at the endpoint derived from its path:
- index.py                 -> /
- echo.py                  -> /echo
- users/_id.py             -> /users/:id
- posts/_slug/comments.py  -> /posts/:slug/comments
"""
