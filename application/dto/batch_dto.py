# application/dto/batch_dto.py
# Data Transfer Objects for per-file and batch trimming results.

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class FileTrimResultDTO:
    """Result for a single file."""
    input_path: str
    output_path: str
    status: str = "queued"       # trimmed | untrimmed | silent | skipped | error
    samples_in: int = 0
    samples_out: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status != "error"


@dataclass
class BatchTrimResultDTO:
    """Result for a whole directory run."""
    input_dir: str = ""
    output_dir: str = ""
    results: List[FileTrimResultDTO] = field(default_factory=list)
    failed_paths: List[str] = field(default_factory=list)
    total: int = 0

    def count(self, status: str) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def processed(self) -> int:
        """Files handled without error (including silent and skipped ones)."""
        return sum(1 for r in self.results if r.ok)

    @property
    def silent(self) -> int:
        return self.count("silent") + self.count("skipped")

    @property
    def failed(self) -> int:
        return len(self.failed_paths)
