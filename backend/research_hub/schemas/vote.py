"""Pydantic schemas for votes."""

from typing import Literal

from research_hub.schemas.targets import TargetRef

VoteTargetType = Literal["job", "paper", "resource", "user_resource", "comment"]


class VoteCreate(TargetRef):
    target_type: VoteTargetType
    vote_type: Literal[1, -1]
