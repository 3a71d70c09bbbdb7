"""Status enumerations with explicit transition tables."""

import enum


class ScheduledActionStatus(str, enum.Enum):
    PENDING = "pending"
    EXECUTED = "executed"
    CANCELLED = "cancelled"

    def can_transition_to(self, target: "ScheduledActionStatus") -> bool:
        return target in _SCHEDULED_ACTION_TRANSITIONS[self]

    @property
    def is_terminal(self) -> bool:
        return not _SCHEDULED_ACTION_TRANSITIONS[self]


_SCHEDULED_ACTION_TRANSITIONS = {
    ScheduledActionStatus.PENDING: {ScheduledActionStatus.EXECUTED, ScheduledActionStatus.CANCELLED},
    ScheduledActionStatus.EXECUTED: set(),
    ScheduledActionStatus.CANCELLED: set(),
}


class TicketStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    REJECTED = "rejected"

    def can_transition_to(self, target: "TicketStatus") -> bool:
        return target == self or target in _TICKET_TRANSITIONS[self]


# Closed tickets can only be reopened
_TICKET_TRANSITIONS = {
    TicketStatus.PENDING: {TicketStatus.IN_PROGRESS, TicketStatus.RESOLVED, TicketStatus.REJECTED},
    TicketStatus.IN_PROGRESS: {TicketStatus.PENDING, TicketStatus.RESOLVED, TicketStatus.REJECTED},
    TicketStatus.RESOLVED: {TicketStatus.PENDING},
    TicketStatus.REJECTED: {TicketStatus.PENDING},
}


class AnnouncementPriority(str, enum.Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"

    @property
    def rank(self) -> int:
        return list(AnnouncementPriority).index(self)


class BulkAction(str, enum.Enum):
    SUSPEND = "suspend"
    UNSUSPEND = "unsuspend"
    DELETE = "delete"
    UPDATE_QUOTA = "update_quota"
    ASSIGN_GROUP = "assign_group"
