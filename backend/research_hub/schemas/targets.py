"""Shared shape for requests that point at a job, paper, resource or comment."""

from pydantic import BaseModel

# Which optional id field carries the target for each target type
TARGET_ID_FIELDS = {
    "job": "job_id",
    "paper": "paper_id",
    "resource": "resource_id",
    "user_resource": "user_resource_id",
    "comment": "comment_id",
}


class TargetRef(BaseModel):
    """Either `target_id` or the id field matching `target_type` must be set."""

    target_id: str | None = None
    job_id: str | None = None
    paper_id: str | None = None
    resource_id: str | None = None
    user_resource_id: str | None = None
    comment_id: str | None = None

    def resolve_target_id(self, target_type: str) -> str | None:
        field = TARGET_ID_FIELDS.get(target_type)
        value = getattr(self, field) if field else None
        return value or self.target_id
