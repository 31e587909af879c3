"""Storage singleton shared by the API blueprints."""
from models.db_storage import DBStorage

storage = DBStorage()
storage.reload()
