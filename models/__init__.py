"""
Persistence package. `storage` is the process-wide DBStorage; the application
factory points it at DATABASE_URL and creates the tables.
"""
from models.db_storage import DBStorage

storage = DBStorage()
