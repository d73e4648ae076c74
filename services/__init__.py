"""
services - Business-logic layer sitting between API and DB.
"""

from services.catalog_service import CatalogService        # noqa: F401
from services.import_service import start_import, import_file   # noqa: F401
