"""
Storage singleton. create_app() binds it to the configured DB_PATH via
storage.init_app(app); repositories pick it up from here.
"""
from models.file_storage import FileStorage

storage = FileStorage()
