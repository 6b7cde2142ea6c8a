import string
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from clubhouse.domain.errors import CodeExpired, InvalidCode
from clubhouse.domain.services import secure_compare

# Only ASCII letters are folded; str.upper() would merge e.g. "ß" into "SS".
_ASCII_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)


def normalize_email(email: str) -> str:
    normalized = (email or "").strip().translate(_ASCII_UPPER)
    if not normalized:
        raise ValueError("email is required")
    return normalized


@dataclass
class Identity:
    email: str
    current_code: str | None = None
    code_issued_at: datetime | None = None
    session_token: str | None = None
    ip_address: str | None = None
    profile: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.email = normalize_email(self.email)

    def issue_code(self, code: str, when: datetime) -> None:
        self.current_code = code
        self.code_issued_at = when

    def verify_code(self, submitted: str, now: datetime, ttl: timedelta) -> None:
        """
        Raise InvalidCode on mismatch, CodeExpired once now >= issued_at + ttl.
        A mismatch is reported before expiry when both apply.
        """
        matches = self.current_code is not None and secure_compare(
            submitted, self.current_code
        )
        if not matches:
            raise InvalidCode()
        if self.code_issued_at is None or now >= self.code_issued_at + ttl:
            raise CodeExpired()

    def start_session(self, token: str, ip_address: str | None) -> None:
        self.session_token = token
        self.ip_address = ip_address

    def accepts_session(self, presented: str | None) -> bool:
        if presented is None or self.session_token is None:
            return False
        return secure_compare(presented, self.session_token)
