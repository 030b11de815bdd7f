from typing import Optional

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, registry

table_registry = registry()


# Associations are plain foreign-key columns. There is no relationship()
# attribute, so nothing loads a related row unless a query joins it.
@table_registry.mapped_as_dataclass
class Team:
    __tablename__ = "teams"

    id: Mapped[int] = mapped_column("team_id", init=False, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    leader_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("members.member_id", use_alter=True, name="fk_teams_leader_id"), default=None
    )


@table_registry.mapped_as_dataclass
class Member:
    __tablename__ = "members"

    id: Mapped[int] = mapped_column("member_id", init=False, primary_key=True)
    username: Mapped[str] = mapped_column(String(255), index=True)
    age: Mapped[int]
    team_id: Mapped[Optional[int]] = mapped_column(ForeignKey("teams.team_id"), default=None, index=True)
