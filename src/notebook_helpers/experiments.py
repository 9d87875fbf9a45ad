"""
In-memory experiment log for prompt debugging sessions.
Records can be saved to and loaded from JSON lines and compared as a DataFrame.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd

from common.logging import get_logger
from common.utils import read_json_lines, write_json_lines
from schemas.llm_types import LLMResponse

logger = get_logger(__name__)


@dataclass
class ExperimentRecord:
    """One notebook cell execution."""

    prompt: str
    provider: str
    model_name: str
    response: str
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    cost: Optional[float]
    latency_ms: float
    timestamp: datetime
    system: Optional[str] = None
    label: Optional[str] = None
    tags: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(
        cls,
        prompt: str,
        response: LLMResponse,
        system: Optional[str] = None,
        label: Optional[str] = None,
        tags: Optional[Dict[str, Any]] = None,
    ) -> "ExperimentRecord":
        return cls(
            prompt=prompt,
            provider=response.provider,
            model_name=response.model_name,
            response=response.content,
            prompt_tokens=response.prompt_tokens,
            completion_tokens=response.completion_tokens,
            total_tokens=response.total_tokens,
            cost=response.cost,
            latency_ms=response.latency_ms,
            timestamp=response.created_at,
            system=system,
            label=label,
            tags=dict(tags or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExperimentRecord":
        data = dict(data)
        data["timestamp"] = datetime.fromisoformat(data["timestamp"])
        return cls(**data)


class ExperimentLog:
    """Ordered collection of experiment records owned by a notebook session."""

    def __init__(self, records: Optional[List[ExperimentRecord]] = None):
        self.records: List[ExperimentRecord] = list(records or [])

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def record(
        self,
        prompt: str,
        response: LLMResponse,
        system: Optional[str] = None,
        label: Optional[str] = None,
        tags: Optional[Dict[str, Any]] = None,
    ) -> ExperimentRecord:
        entry = ExperimentRecord.from_response(prompt, response, system, label, tags)
        self.records.append(entry)
        return entry

    def clear(self) -> None:
        self.records.clear()

    def total_cost(self) -> float:
        """Sum of known costs; records with unknown cost count as zero."""
        return round(sum(r.cost for r in self.records if r.cost is not None), 6)

    def total_tokens(self) -> int:
        return sum(r.total_tokens for r in self.records)

    def save(self, file_path: str) -> int:
        """
        Write all records to a JSON-lines file, replacing it.

        Returns:
            int: Number of records written.
        """
        count = write_json_lines(file_path, (r.to_dict() for r in self.records))
        logger.info("Experiment log saved", extra={"path": str(file_path), "records": count})
        return count

    @classmethod
    def load(cls, file_path: str) -> "ExperimentLog":
        records = [ExperimentRecord.from_dict(row) for row in read_json_lines(file_path)]
        logger.info("Experiment log loaded", extra={"path": str(file_path), "records": len(records)})
        return cls(records)

    def to_dataframe(self) -> pd.DataFrame:
        """One row per record, columns in record field order."""
        columns = list(ExperimentRecord.__dataclass_fields__)
        return pd.DataFrame([asdict(r) for r in self.records], columns=columns)

    def summary(self) -> pd.DataFrame:
        """
        Aggregate runs, tokens, cost and mean latency per provider/model.
        """
        df = self.to_dataframe()
        if df.empty:
            return pd.DataFrame(
                columns=["provider", "model_name", "runs", "total_tokens", "cost", "mean_latency_ms"]
            )
        return (
            df.groupby(["provider", "model_name"], as_index=False)
            .agg(
                runs=("prompt", "count"),
                total_tokens=("total_tokens", "sum"),
                cost=("cost", "sum"),
                mean_latency_ms=("latency_ms", "mean"),
            )
        )
