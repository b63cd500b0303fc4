from models.base_model import BaseRepository


class CategoryRepository(BaseRepository):
    collection = "categories"
