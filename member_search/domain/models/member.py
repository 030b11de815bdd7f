from typing import Optional

from pydantic import BaseModel


class Team(BaseModel):
    name: str
    id: Optional[int] = None
    leader_id: Optional[int] = None


class Member(BaseModel):
    username: str
    age: int
    id: Optional[int] = None
    team_id: Optional[int] = None
