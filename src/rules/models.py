from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class QueryMode(str, Enum):
    ADD = "add"
    REMOVE = "remove"
    SKIP = "skip"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: str) -> "QueryMode":
        for mode in (cls.ADD, cls.REMOVE, cls.SKIP):
            if raw == mode.value:
                return mode
        return cls.UNKNOWN


class Query(BaseModel):
    model_config = ConfigDict(frozen=True)

    params: dict[str, str] = Field(default_factory=dict)
    mode: str = ""  # raw value; unrecognised modes are logged and skipped

    @property
    def resolved_mode(self) -> QueryMode:
        return QueryMode.parse(self.mode)


class OrganiserActions(BaseModel):
    model_config = ConfigDict(frozen=True)

    set: tuple[str, ...] = ()
    unset: tuple[str, ...] = ()


class Assignment(BaseModel):
    model_config = ConfigDict(frozen=True)

    queries: tuple[Query, ...] = ()
    categories: OrganiserActions = Field(default_factory=OrganiserActions)
    tags: OrganiserActions = Field(default_factory=OrganiserActions)


class QueryAssignments(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    repeat_secs: int = Field(default=0, alias="repeat-secs")
    timeout_secs: int = Field(default=0, alias="timeout-secs")
    assignments: tuple[Assignment, ...] = ()

    @model_validator(mode="after")
    def _intervals_set_when_needed(self) -> "QueryAssignments":
        if self.assignments:
            if self.timeout_secs <= 0:
                raise ValueError("timeout-secs for query assignment must be positive")
            if self.repeat_secs <= 0:
                raise ValueError("repeat-secs for query assignment must be positive")
        return self

    @property
    def enabled(self) -> bool:
        return len(self.assignments) > 0
