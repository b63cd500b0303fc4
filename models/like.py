from models.base_model import BaseRepository, Record


class LikeRepository(BaseRepository):
    """Likes from one user to another, optionally tied to a skill."""

    collection = "likes"

    def find_pair(self, from_user_id: int, to_user_id: int) -> Record | None:
        return self.first(fromUserId=from_user_id, toUserId=to_user_id)

    @staticmethod
    def summary(likes: list, user_id: int, viewer_id: int | None) -> dict:
        """likesCount / isLikedByCurrentUser for `user_id`, computed over a loaded snapshot."""
        return {
            "likesCount": sum(1 for l in likes if l.get("toUserId") == user_id),
            "isLikedByCurrentUser": bool(viewer_id) and any(
                l.get("fromUserId") == viewer_id and l.get("toUserId") == user_id for l in likes
            ),
        }
