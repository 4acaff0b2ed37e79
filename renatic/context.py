"""State shared by every step of one generation run."""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .minifier import MinificationLevel
from .renderer import ContentRenderer
from .settings import Config


@dataclass(frozen=True)
class GenerationContext:
    """Owned by the orchestrator and handed to the steps it drives. Read-only."""

    source_dir: Path
    output_dir: Path
    config: Config
    renderer: ContentRenderer
    markdown: Callable[[str], str]
    level: MinificationLevel = MinificationLevel.DISABLED
