"""Domain enumerations for cases and their attachments."""

from enum import Enum


class _ValuesMixin:
    @classmethod
    def values(cls) -> list[str]:
        """Return all enum values as strings (for validation messages)."""
        return [member.value for member in cls]  # type: ignore[attr-defined]


class CaseStatus(_ValuesMixin, str, Enum):
    """Lifecycle status of a case. COMPLETED is the disposed state."""

    PENDING = "pending"
    HEARING = "hearing"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, value: str) -> "CaseStatus":
        """Parse a status, accepting ``disposed`` as an alias for completed.

        Raises:
            ValueError: If the value is not a known status.
        """
        normalized = value.strip().lower()
        if normalized == "disposed":
            return cls.COMPLETED
        return cls(normalized)


class OnBehalfOf(_ValuesMixin, str, Enum):
    """Party the advocate appears for."""

    PETITIONER = "Petitioner"
    RESPONDENT = "Respondent"
    COMPLAINANT = "Complainant"
    ACCUSED = "Accused"
    PLAINTIFF = "Plaintiff"
    DHR = "DHR"
    JDR = "JDR"
    APPELLANT = "Appellant"


class SectionName(_ValuesMixin, str, Enum):
    """The four fixed sections of a case file, in display and scan order."""

    DRAFTS = "drafts"
    OPPONENT_DRAFTS = "opponentDrafts"
    COURT_ORDERS = "courtOrders"
    EVIDENCE = "evidence"


class AttachmentType(_ValuesMixin, str, Enum):
    """Discriminator of the attachment tagged union."""

    FILE = "file"
    NOTE = "note"
