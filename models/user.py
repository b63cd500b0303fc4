from models.base_model import BaseRepository, Record


class UserRepository(BaseRepository):
    collection = "users"

    def find_by_email(self, email: str) -> Record | None:
        # exact match, emails are compared as stored
        return self.first(email=email)

    @staticmethod
    def to_public(user: Record) -> Record:
        """Copy of the record without the password hash."""
        return {k: v for k, v in user.items() if k != "password"}
