from studynow.models.user import User
from studynow.models.subject import Subject
from studynow.models.topic import Topic
from studynow.models.preferences import UserPreferences
from studynow.models.review_log import ReviewLog

__all__ = [
    "User",
    "Subject",
    "Topic",
    "UserPreferences",
    "ReviewLog"
]
