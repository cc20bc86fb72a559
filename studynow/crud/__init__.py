from studynow.crud.user import create_user, get_user, list_users
from studynow.crud.subject import (
    create_subject,
    get_subject,
    get_subjects,
    update_subject,
    delete_subject
)
from studynow.crud.topic import (
    create_topic,
    get_topic,
    get_topics,
    update_topic,
    delete_topic,
    save_topic_review
)
from studynow.crud.preferences import get_preferences, update_preferences
from studynow.crud.review_log import add_review_log, get_review_logs

__all__ = [
    "create_user",
    "get_user",
    "list_users",
    "create_subject",
    "get_subject",
    "get_subjects",
    "update_subject",
    "delete_subject",
    "create_topic",
    "get_topic",
    "get_topics",
    "update_topic",
    "delete_topic",
    "save_topic_review",
    "get_preferences",
    "update_preferences",
    "add_review_log",
    "get_review_logs",
]
