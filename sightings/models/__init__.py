from .user import User
from .photo import Photo
from .comment import Comment
from .report import Report
from .notification import Notification
from .device_token import DeviceToken

__all__ = [
    "User",
    "Photo",
    "Comment",
    "Report",
    "Notification",
    "DeviceToken",
]
