"""Model classification: stream token deltas or block for the whole reply.

High-latency reasoning models are asked for one complete response; everything
else streams. The decision is an ordered rule table so new model families are
added as data. The first rule whose pattern is found in the model name wins.
"""

import re
from collections.abc import Iterable, Sequence
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResponseMode(str, Enum):
    """How a model's reply is requested."""
    STREAMING = "streaming"
    BLOCKING = "blocking"


class ClassificationRule(BaseModel):
    """A regex searched for anywhere in the model name."""

    model_config = ConfigDict(frozen=True)

    pattern: str = Field(description="Regular expression, unanchored unless it says otherwise")
    mode: ResponseMode

    @field_validator("pattern")
    @classmethod
    def _compiles(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"invalid pattern {value!r}: {e}") from e
        return value

    def matches(self, model_name: str) -> bool:
        return re.search(self.pattern, model_name) is not None


# Order matters: exceptions to a family come before the family itself.
DEFAULT_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(pattern=r"gpt-.+-search", mode=ResponseMode.STREAMING),
    ClassificationRule(pattern=r"^gpt-5.*(nano|mini)$", mode=ResponseMode.STREAMING),
    ClassificationRule(pattern=r"^gpt-5", mode=ResponseMode.BLOCKING),
    ClassificationRule(pattern=r"^grok-4-fast.*non-reasoning", mode=ResponseMode.STREAMING),
    ClassificationRule(pattern=r"^o\d+", mode=ResponseMode.BLOCKING),
    ClassificationRule(pattern=r"^(models/)?gemini-\d+\.\d+-pro.*", mode=ResponseMode.BLOCKING),
    ClassificationRule(pattern=r"^deepseek-reasoner$", mode=ResponseMode.BLOCKING),
    ClassificationRule(pattern=r"^grok-4.*", mode=ResponseMode.BLOCKING),
    ClassificationRule(pattern=r"^claude-opus-4.*", mode=ResponseMode.BLOCKING),
)


class ModelClassifier:
    """Ordered rule list mapping model names to a response mode."""

    def __init__(
        self,
        rules: Iterable[ClassificationRule] | None = None,
        default: ResponseMode = ResponseMode.STREAMING,
    ):
        self._rules: tuple[ClassificationRule, ...] = (
            tuple(rules) if rules is not None else DEFAULT_RULES
        )
        self._default = default

    @property
    def rules(self) -> Sequence[ClassificationRule]:
        return self._rules

    def classify(self, model_name: str) -> ResponseMode:
        for rule in self._rules:
            if rule.matches(model_name):
                return rule.mode
        return self._default

    def is_blocking(self, model_name: str) -> bool:
        return self.classify(model_name) is ResponseMode.BLOCKING
