"""
Refresh-token store: remembers the one live refresh token of every user.
Records:
- userId (int)
- token (the signed JWT string)
- createdAt (ISO timestamp)

A refresh token is only honoured while its exact (userId, token) pair is
present here, so issuing a new one or logging out invalidates the old one
even though its signature is still good.
"""
import logging

from models.base_model import BaseRepository, utcnow_iso

logger = logging.getLogger(__name__)


class RefreshTokenRepository(BaseRepository):
    collection = "refresh-tokens"

    def save(self, user_id: int, token: str) -> None:
        """Replace whatever the user had with `token`."""
        records = [t for t in self.all() if t.get("userId") != user_id]
        records.append({"userId": user_id, "token": token, "createdAt": utcnow_iso()})
        self.save_all(records)

    def is_valid(self, user_id: int, token: str) -> bool:
        return any(t.get("userId") == user_id and t.get("token") == token for t in self.all())

    def revoke(self, user_id: int, token: str) -> None:
        records = self.all()
        kept = [t for t in records if not (t.get("userId") == user_id and t.get("token") == token)]
        if len(kept) == len(records):
            logger.debug("No refresh token to revoke for user %s", user_id)
            return
        self.save_all(kept)

    def delete_by_user_id(self, user_id: int) -> None:
        records = self.all()
        kept = [t for t in records if t.get("userId") != user_id]
        if len(kept) != len(records):
            self.save_all(kept)
