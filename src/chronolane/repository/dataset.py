# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Any, Optional, cast

from yaml import load

try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader  # type: ignore[assignment]

from chronolane.model.dataset import TimelineDataset
from chronolane.time import date_key

_RECORD_LISTS = ("elements", "completed_elements", "capacities", "stages")
_DATE_FIELDS = ("date", "start_date", "end_date")


class DatasetRepository:
    """
    A timeline dataset stored as one YAML file.

    The file is read on first access. Unquoted YAML dates come back from the
    loader as date objects and are normalized to 'YYYY-MM-DD' strings, the
    same shape a host application would hand to the layout engine.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._dataset: Optional[TimelineDataset] = None

    @property
    def dataset(self) -> TimelineDataset:
        if self._dataset is None:
            self.__load_data()
        if self._dataset is None:
            raise ValueError()
        return self._dataset

    def __load_data(self) -> None:
        raw = load(self.path.read_text(), Loader=Loader)
        if not isinstance(raw, dict):
            raise ValueError(f"Dataset {self.path} is not a mapping")
        self._dataset = self.__convert_dataset_for_deserialization(raw)

    def __convert_dataset_for_deserialization(
        self, raw: dict[str, Any]
    ) -> TimelineDataset:
        for field in ("start_date", "end_date"):
            if date_key(raw.get(field)) is None:
                raise ValueError(f"Dataset {self.path} has no usable {field}")

        dataset: dict[str, Any] = {
            "start_date": date_key(raw["start_date"]),
            "end_date": date_key(raw["end_date"]),
            "capacity_ceiling": int(raw.get("capacity_ceiling") or 0),
        }
        for list_name in _RECORD_LISTS:
            records = raw.get(list_name) or []
            dataset[list_name] = [
                _normalize_record(record) if isinstance(record, dict) else record
                for record in records
            ]
        return cast(TimelineDataset, dataset)


def _normalize_record(record: dict[str, Any]) -> dict[str, Any]:
    normalized = dict(record)
    for field in _DATE_FIELDS:
        value = normalized.get(field)
        if value is not None and not isinstance(value, str):
            # Leave unparsable values in place, validation drops the record
            normalized[field] = date_key(value) or value
    return normalized


def load_dataset(path: Path) -> TimelineDataset:
    return DatasetRepository(path).dataset
