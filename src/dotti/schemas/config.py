"""Configuration schema — validates dotti.yml."""

from pydantic import BaseModel, field_validator, model_validator

from dotti.schemas.tech_stack import ALL_DESTINATIONS, Destination


class AnalysisPolicy(BaseModel):
    """Thresholds used by the conflict analyzer."""

    # An agent pair is flagged when shared triggers / smaller trigger set exceeds this.
    overlap_threshold: float = 0.5
    # Descriptions shorter than this are flagged as vague without a verb check.
    vague_min_length: int = 30

    @model_validator(mode="after")
    def check_ranges(self) -> "AnalysisPolicy":
        if not 0.0 <= self.overlap_threshold < 1.0:
            raise ValueError("overlap_threshold must be within [0, 1)")
        if self.vague_min_length < 0:
            raise ValueError("vague_min_length must not be negative")
        return self


class DottiConfig(BaseModel):
    """Top-level configuration loaded from dotti.yml.

    Every field is optional; an absent file means the defaults below.
    """

    # Destinations written by ``dotti generate`` when --target is not given.
    targets: list[Destination] = list(ALL_DESTINATIONS)

    # Overwrite existing files when writing generated configs.
    force: bool = False

    policy: AnalysisPolicy = AnalysisPolicy()

    @field_validator("targets", mode="before")
    @classmethod
    def expand_all(cls, v: object) -> object:
        if v == "all" or v == ["all"]:
            return list(ALL_DESTINATIONS)
        return v

    @model_validator(mode="after")
    def check_has_targets(self) -> "DottiConfig":
        if not self.targets:
            raise ValueError("At least one target is required")
        return self
