class StudyNowError(Exception):
    """Base class for errors raised by studynow"""


class NotFoundError(StudyNowError):
    """A record does not exist or does not belong to the calling user"""

    entity = "Record"

    def __init__(self, record_id, user_id=None):
        self.record_id = record_id
        self.user_id = user_id
        owner = f" for user {user_id}" if user_id is not None else ""
        super().__init__(f"{self.entity} {record_id} not found{owner}")


class UserNotFoundError(NotFoundError):
    entity = "User"


class SubjectNotFoundError(NotFoundError):
    entity = "Subject"


class TopicNotFoundError(NotFoundError):
    entity = "Topic"


class DataIntegrityError(StudyNowError):
    """Topics reference subjects that are missing from the supplied set"""

    def __init__(self, issues):
        self.issues = list(issues)
        topic_ids = ", ".join(str(issue.topic_id) for issue in self.issues)
        super().__init__(f"Topics reference unknown subjects: {topic_ids}")
