"""OTP record model and key layout."""

import json
import secrets
from dataclasses import dataclass
from datetime import datetime

CODE_LENGTH = 6


def otp_key(phone_number: str) -> str:
    return f"otp:{phone_number}"


def rate_limit_key(phone_number: str) -> str:
    return f"rate_limit:{phone_number}"


def generate_code() -> str:
    """Draw a 6-digit code uniformly from 000000..999999."""
    return f"{secrets.randbelow(10 ** CODE_LENGTH):0{CODE_LENGTH}d}"


@dataclass
class OTPRecord:
    """One active code per phone number, stored JSON-encoded."""
    phone_number: str
    code: str
    expires_at: datetime
    attempts: int = 0

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def to_json(self) -> str:
        return json.dumps({
            "phone_number": self.phone_number,
            "code": self.code,
            "expires_at": self.expires_at.isoformat(),
            "attempts": self.attempts,
        })

    @classmethod
    def from_json(cls, raw: str) -> "OTPRecord":
        data = json.loads(raw)
        return cls(
            phone_number=data["phone_number"],
            code=data["code"],
            expires_at=datetime.fromisoformat(data["expires_at"]),
            attempts=int(data.get("attempts", 0))
        )
