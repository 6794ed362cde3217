"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class AnnotateConfig:
    back_to: List[str] = field(default_factory=list)  # first divergent one wins
    inner: List[str] = field(default_factory=list)  # inner filter command + args
    old_prefixes: List[str] = field(default_factory=lambda: ["a/"])


@dataclass
class SummaryConfig:
    format: Optional[str] = None  # git pretty format; None = no summary
    color: bool = True


@dataclass
class LoggingConfig:
    level: LogLevel = "WARNING"


@dataclass
class BlameDiffConfig:
    version: str = "1.0"
    annotate: AnnotateConfig = field(default_factory=AnnotateConfig)
    summary: SummaryConfig = field(default_factory=SummaryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
