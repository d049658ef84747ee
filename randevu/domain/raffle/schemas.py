"""Raffle domain schemas"""

from typing import Optional

from pydantic import BaseModel


class ParticipationCreate(BaseModel):
    # Checked in the service so zero, negative and missing values give a 400
    rightsToUse: Optional[int] = None
