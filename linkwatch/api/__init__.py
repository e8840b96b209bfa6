"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from linkwatch.api import app

    uvicorn linkwatch.api:app
"""

from linkwatch.api.app import app

__all__ = ["app"]
