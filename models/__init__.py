"""Models package: exposes the process-wide DBStorage instance.

The engine is bound by the application factory (storage.reload(url)).
"""
from models.db_storage import DBStorage

storage = DBStorage()
