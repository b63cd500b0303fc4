from models.base_model import BaseRepository


class SubcategoryRepository(BaseRepository):
    collection = "subcategories"
