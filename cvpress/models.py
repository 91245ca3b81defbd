# cvpress/models.py
"""
Plain data records shared by the exporter and the generation client.
"""

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(frozen=True)
class PersonalDetails:
    """Candidate contact block. `full_name` is required by callers, the rest may be empty."""
    full_name: str
    email: str = ""
    phone: str = ""
    address: str = ""

    def contact_fields(self) -> List[str]:
        # header order: address | phone | email
        return [f.strip() for f in (self.address, self.phone, self.email) if f and f.strip()]


@dataclass
class HiringRequest:
    details: PersonalDetails
    cv_text: str
    job_description: str
    job_title: str
    company_name: str
    tone: str = "Professional"
    company_type: str = "Established Corporation"
    language: str = "English"


@dataclass
class Score:
    score: int
    summary: str


@dataclass
class GeneratedContent:
    cover_letter: str
    revamped_cv: str
    linkedin_message: str
    scores: Dict[str, Score] = field(default_factory=dict)


@dataclass
class ChatMessage:
    role: str  # "user" | "model"
    text: str
