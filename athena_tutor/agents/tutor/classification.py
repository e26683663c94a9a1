"""Topic and difficulty classification of math problems."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from athena_tutor.agents.tutor.accumulator import recover_arguments
from athena_tutor.exceptions import ArgumentRecoveryError

Difficulty = Literal["easy", "medium", "hard"]


class TopicMetadata(BaseModel):
    """Classification stored with a student's progress events.

    Attributes:
        topic: Broad area, e.g. "algebra"
        sub_topic: Specific skill, e.g. "linear equations"
        difficulty: easy, medium or hard
    """

    model_config = ConfigDict(populate_by_name=True)

    topic: str = Field(min_length=1)
    sub_topic: str | None = Field(None, alias="subTopic")
    difficulty: Difficulty = "medium"


FALLBACK_TOPIC = TopicMetadata(topic="unknown", difficulty="medium")


def parse_topic_reply(reply: str) -> TopicMetadata:
    """Parse the classifier's reply, falling back to an unknown topic.

    The reply is recovered the same way streamed tool arguments are, so a
    model that wraps its JSON in prose or code fences is still understood.
    """
    try:
        data = recover_arguments(reply)
        metadata = TopicMetadata.model_validate(data)
    except (ArgumentRecoveryError, ValidationError):
        return FALLBACK_TOPIC
    return metadata.model_copy(update={"topic": metadata.topic.strip().lower()})
