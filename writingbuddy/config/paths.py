from dataclasses import dataclass
from pathlib import Path

CONFIG_FILENAME = "writingbuddy.json"


@dataclass
class WritingBuddyPaths:
    """Centralizes filesystem paths for a writingbuddy workspace."""

    root: Path

    @property
    def config_file(self) -> Path:
        return self.root / CONFIG_FILENAME

    @property
    def global_dir(self) -> Path:
        return Path.home() / ".writingbuddy"

    @property
    def global_config_file(self) -> Path:
        return self.global_dir / CONFIG_FILENAME

    @property
    def logs_dir(self) -> Path:
        return self.global_dir / "logs"
