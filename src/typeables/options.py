import os

from pydantic import BaseModel, Field


class GenerationOptions(BaseModel):
    max_examples: int = Field(default=100, ge=1)
    max_size: int = Field(default=100, ge=0)
    max_shrinks: int = Field(default=1_000, ge=0)
    seed: int | None = None

    @classmethod
    def create_from_env(cls) -> "GenerationOptions":
        max_examples = int(os.getenv("TYPEABLES_MAX_EXAMPLES", 100))
        max_size = int(os.getenv("TYPEABLES_MAX_SIZE", 100))
        max_shrinks = int(os.getenv("TYPEABLES_MAX_SHRINKS", 1_000))
        seed = os.getenv("TYPEABLES_SEED")
        return GenerationOptions(
            max_examples=max_examples,
            max_size=max_size,
            max_shrinks=max_shrinks,
            seed=int(seed) if seed is not None else None,
        )
