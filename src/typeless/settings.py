from pydantic import BaseModel, ConfigDict, Field


class CompositionSettings(BaseModel):
    """Tuning knobs for conversion resolution.

    Example:
        registry = ConverterRegistry(settings=CompositionSettings(max_depth=4))
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_depth: int = Field(default=10, ge=0)
    """Upper bound on the depth of a synthesized chain, not counting its first step.

    The effective bound is the smaller of this and half the number of
    registered conversions.
    """

    cache_unsolvable: bool = True
    """Whether failed searches are remembered so repeated requests fail fast."""
