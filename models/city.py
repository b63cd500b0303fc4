from models.base_model import BaseRepository


class CityRepository(BaseRepository):
    collection = "cities"
