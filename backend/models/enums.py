"""
Enums for jobs, job events and storage providers
"""

from enum import Enum


class JobStatus(str, Enum):
    """Job application status. No other value is valid input or output."""
    APPLIED = "applied"
    INTERVIEW = "interview"
    REJECTED = "rejected"
    OFFER = "offer"
    ACCEPTED = "accepted"


class EventType(str, Enum):
    """Lifecycle event type."""
    APPLIED = "applied"
    INTERVIEW_SCHEDULED = "interview_scheduled"
    INTERVIEW = "interview"
    INTERVIEW_RESULT = "interview_result"
    REJECTED = "rejected"
    OFFER_RECEIVED = "offer_received"
    OFFER_ACCEPTED = "offer_accepted"
    OFFER_DECLINED = "offer_declined"
    WITHDRAWN = "withdrawn"
    GHOSTED = "ghosted"


# Event types whose eventDate carries a time of day
TIMED_EVENT_TYPES = frozenset({EventType.INTERVIEW_SCHEDULED, EventType.INTERVIEW})


class InterviewType(str, Enum):
    PHONE = "phone"
    VIDEO = "video"
    ONSITE = "onsite"
    TECHNICAL = "technical"
    HR = "hr"
    FINAL = "final"
    OA = "oa"
    VO = "vo"


class InterviewResult(str, Enum):
    PENDING = "pending"
    PASSED = "passed"
    FAILED = "failed"
    WAITING = "waiting"
    CANCELLED = "cancelled"


class ProviderKind(str, Enum):
    """
    Storage provider identities

    Used by the session policy, the provider registry and API responses.
    """
    MOCK = "mock"
    RELATIONAL = "relational"
    HOSTED = "hosted"

    @classmethod
    def list_all(cls) -> list[str]:
        """
        Get list of all provider names

        Example:
            >>> ProviderKind.list_all()
            ['mock', 'relational', 'hosted']
        """
        return [provider.value for provider in cls]

    @classmethod
    def from_string(cls, provider_name: str) -> "ProviderKind":
        """
        Convert string to ProviderKind enum

        Args:
            provider_name: Provider name (case-insensitive)

        Raises:
            ValueError: If provider not found

        Example:
            >>> ProviderKind.from_string("HOSTED")
            <ProviderKind.HOSTED: 'hosted'>
        """
        try:
            return cls(provider_name.strip().lower())
        except ValueError:
            valid = ", ".join(cls.list_all())
            raise ValueError(
                f"Unknown provider '{provider_name}'. "
                f"Valid providers: {valid}"
            )
