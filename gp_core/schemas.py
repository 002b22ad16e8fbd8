from __future__ import annotations

from collections.abc import Mapping
from typing import TypeVar

from pydantic import BaseModel, Field, model_validator


TBaseSchema = TypeVar("TBaseSchema", bound="BaseSchema")


class BaseSchema(BaseModel):
    def to_json(self) -> str:
        return self.model_dump_json()

    def to_dict(self) -> dict[str, object]:
        return self.model_dump()

    @classmethod
    def from_json(cls: type[TBaseSchema], data: str) -> TBaseSchema:
        return cls.model_validate_json(data)

    @classmethod
    def from_dict(cls: type[TBaseSchema], data: Mapping[str, object]) -> TBaseSchema:
        return cls.model_validate(data)


class Params(BaseSchema):
    """High level training parameters for one population."""

    in_cnt: int = Field(gt=0)
    out_cnt: int = Field(gt=0)
    op_cnt: int = Field(gt=0)
    pop_cnt: int = Field(gt=0)
    elite_divisor: int = Field(default=10, gt=0)
    continue_mutation_pct: int = Field(default=66, ge=0, lt=100)

    @model_validator(mode="after")
    def op_cnt_fills_whole_slots(self) -> Params:
        if self.op_cnt % self.out_cnt != 0:
            raise ValueError("op_cnt must be a multiple of out_cnt")
        return self

    @property
    def elite_count(self) -> int:
        return max(1, self.pop_cnt // self.elite_divisor)


class RunConfig(BaseSchema):
    run_id: str
    seed: int | None = None
    max_ticks: int = Field(ge=0)
    report_interval: int = Field(default=100, gt=0)
    task_name: str
    params: Params
