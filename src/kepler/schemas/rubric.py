from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Rubric(BaseModel):
    """Single weighted scoring criterion."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    criterion_name: str
    criterion_description: str
    keywords: str | None = None  # comma/semicolon separated words or phrases
    weight: float = Field(default=0.25, ge=0)
    min_words: int = Field(default=0, ge=0)
    max_words: int = Field(default=9999, ge=0)  # 0 = no effective cap
    is_active: bool = True

    @model_validator(mode="after")
    def _check_word_range(self) -> "Rubric":
        if self.max_words and self.max_words < self.min_words:
            raise ValueError(
                f"max_words ({self.max_words}) must be >= min_words ({self.min_words})"
            )
        return self
