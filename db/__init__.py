"""
db - Database layer.

Public API:
    init_db()       → create engine + tables
    get_session()   → new Session
    Category, Supplier, Material, ImportJob → ORM models
"""

from db.engine import init_db, get_session, is_initialised, dispose_db   # noqa: F401
from db.models import (                                                 # noqa: F401
    Base, Category, Supplier, Material, ImportJob, JobStatus,
)
