from models.base_model import BaseRepository


class SkillRepository(BaseRepository):
    """Skills offered or requested by users; `userId` is the owner."""

    collection = "skills"
