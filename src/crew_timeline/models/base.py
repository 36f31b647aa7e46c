"""Base model class for records read from the external schedule store."""

import json
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict


T = TypeVar("T", bound="TimelineModel")


class TimelineModel(BaseModel):
    """Base model class with JSON loading support.

    All record models inherit from this class to get consistent
    deserialization behavior.
    """

    model_config = ConfigDict(
        # Use enum values in serialization
        use_enum_values=True,
        # Validate field assignments
        validate_assignment=True,
        # Accept both field names and store aliases
        populate_by_name=True,
        extra="ignore",
    )

    @classmethod
    def from_dict(cls: type[T], data: Any) -> T:
        """Deserialize model from parsed JSON data."""
        return cls.model_validate(data)

    @classmethod
    def load_from_file(cls: type[T], file_path: str | Path) -> T:
        """Load model from a JSON file.

        Args:
            file_path: Path to the JSON file

        Returns:
            Model instance
        """
        path = Path(file_path)
        return cls.from_dict(json.loads(path.read_text()))
