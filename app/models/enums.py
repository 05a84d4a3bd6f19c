from enum import Enum


# Departments a student can belong to (and a dept head can manage)
DEPARTMENTS = [
    "CSE/AIML/CSD",
    "IT/CME",
    "CIVIL/MECH",
    "ECE",
    "EEE",
]


# Public committee listing order; posts not listed sort last
COMMITTEE_POST_ORDER = [
    "Chair",
    "Vice Chair",
    "Secretary",
    "Vice Secretary",
    "CSE Head",
    "AIML Head",
    "IT Head",
    "Civil Head",
    "ECE Head",
    "EEE Head",
    "Executive Head",
    "Representative Head",
]

class EventStatus(str, Enum):
    Pending = "pending"
    Upcoming = "upcoming"
    Completed = "completed"


class ProjectStatus(str, Enum):
    Open = "open"
    Approved = "approved"
    Rejected = "rejected"
    Closed = "closed"
    Completed = "completed"


class PermissionStatus(str, Enum):
    Pending = "pending"
    Approved = "approved"
    Rejected = "rejected"


class QueryStatus(str, Enum):
    Pending = "pending"
    Resolved = "resolved"


class RequestStatus(str, Enum):
    """Friend requests and direct-message requests."""
    Pending = "pending"
    Accepted = "accepted"
    Rejected = "rejected"
