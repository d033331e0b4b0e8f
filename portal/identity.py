"""
Caller identity as seen by the business logic.
"""
import uuid
from dataclasses import dataclass


@dataclass(frozen=True)
class IdentityData:
    user_id: uuid.UUID
    company_id: uuid.UUID
    email: str
