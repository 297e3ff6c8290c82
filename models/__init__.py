from models.session import Session
from models.subscription import Cost, Subscription, SubscriptionType
from models.lecture_assignment import AssignmentUpdate, LectureAssignment, LectureStatus
from models.group import Group, GroupDraft, GroupFilters, GroupStatus

__all__ = [
    "Session",
    "Cost",
    "Subscription",
    "SubscriptionType",
    "AssignmentUpdate",
    "LectureAssignment",
    "LectureStatus",
    "Group",
    "GroupDraft",
    "GroupFilters",
    "GroupStatus",
]
