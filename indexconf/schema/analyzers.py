"""Analyzer declarations referenced by text mappers."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

# Analyzers available without being declared in the schema.
PREBUILT_ANALYZERS = frozenset(
    {
        "standard",
        "default",
        "keyword",
        "stop",
        "whitespace",
        "simple",
        "classic",
        "arabic",
        "armenian",
        "basque",
        "brazilian",
        "bulgarian",
        "catalan",
        "czech",
        "danish",
        "dutch",
        "english",
        "finnish",
        "french",
        "galician",
        "german",
        "greek",
        "hindi",
        "hungarian",
        "indonesian",
        "irish",
        "italian",
        "latvian",
        "norwegian",
        "persian",
        "portuguese",
        "romanian",
        "russian",
        "spanish",
        "swedish",
        "thai",
        "turkish",
    }
)


class ClasspathAnalyzer(BaseModel):
    """Analyzer instantiated from a class name by the engine."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    type: Literal["classpath"]
    class_name: str = Field(..., alias="class", min_length=1)


class SnowballAnalyzer(BaseModel):
    """Snowball stemming analyzer for a language, with optional comma-separated stopwords."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["snowball"]
    language: str = Field(..., min_length=1)
    stopwords: str | None = None


Analyzer = Annotated[Union[ClasspathAnalyzer, SnowballAnalyzer], Field(discriminator="type")]
