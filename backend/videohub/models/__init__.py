from videohub.models.user import User, watch_history
from videohub.models.video import Video

__all__ = [
    "User",
    "Video",
    "watch_history",
]
