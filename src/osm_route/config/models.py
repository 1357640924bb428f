from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = 1


class IngestModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    progress_every_ways: int = 10_000
    progress_every_nodes: int = 100_000
    progress_every_graph: int = 10_000  # ways per graph-build progress line

    @field_validator("progress_every_ways", "progress_every_nodes", "progress_every_graph")
    @classmethod
    def _positive(cls, v: int, info: ValidationInfo) -> int:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v


# ----------------- SEARCH TRACE ---------------------


class TraceModel(BaseModel):
    """Bounds on the instrumentation trace recorded by animated searches."""

    model_config = ConfigDict(extra="forbid")
    # keep exploring for explore_after_found * explore_multiplier pops after the target
    explore_after_found: int = 50
    explore_multiplier: int = 2
    max_trace_edges: int = 100_000  # hard cap on frontier edges
    dense_edge_threshold: int = 50_000  # below this every edge is kept
    degree_divisor: int = 10  # sample rate = max(1, degree // divisor)
    max_trace_events: int = 100_000  # cap on explored and relaxation events (each)

    @field_validator(
        "explore_after_found",
        "explore_multiplier",
        "max_trace_edges",
        "dense_edge_threshold",
        "max_trace_events",
    )
    @classmethod
    def _nonneg(cls, v: int, info: ValidationInfo) -> int:
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v

    @field_validator("degree_divisor")
    @classmethod
    def _divisor(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("degree_divisor must be > 0")
        return v

    @model_validator(mode="after")
    def _check_caps(self):
        if self.dense_edge_threshold > self.max_trace_edges:
            raise ValueError("dense_edge_threshold must not exceed max_trace_edges")
        return self

    @property
    def exploration_budget(self) -> int:
        return self.explore_after_found * self.explore_multiplier


# ----------------- SESSION ---------------------


class SessionModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    explored_limit: int = Field(default=10_000, ge=0)
    frontier_limit: int = Field(default=30_000, ge=0)
    ways_limit: int = Field(default=1_000, gt=0)
    nodes_limit: int = Field(default=500, gt=0)
    search_limit: int = Field(default=100, gt=0)
    neighbor_limit: int = Field(default=10, ge=0)


# ------------------------------------------------------------------


class RouterModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "osm-route"
    run_id: str = "local"
    log: LogModel = LogModel()
    ingest: IngestModel = IngestModel()
    trace: TraceModel = TraceModel()
    session: SessionModel = SessionModel()
