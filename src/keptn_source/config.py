"""Source configuration and fragment merging."""

import json
from typing import Any, Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError

from .exceptions import ConfigMergeError

DEFAULT_URL = "http://localhost:8080/api"

ConfigFragment = Union[dict, str, bytes, None]


class SourceConfig(BaseModel):
    """Effective configuration of one stream session."""

    model_config = ConfigDict(frozen=True)

    url: str = DEFAULT_URL
    token: str = ""
    project: str = ""
    service: str = ""


class _Fragment(BaseModel):
    # Unknown keys are ignored; known keys must be real strings.
    url: Optional[StrictStr] = None
    token: Optional[StrictStr] = None
    project: Optional[StrictStr] = None
    service: Optional[StrictStr] = None


def merge_configs(fragments: Iterable[ConfigFragment]) -> SourceConfig:
    """Merge partial configuration fragments into one ``SourceConfig``.

    Fragments are applied in order and the last non-empty value for each
    key wins. Empty strings and missing keys never erase a value set by an
    earlier fragment. Keys nobody sets fall back to the defaults.

    Args:
        fragments: Mappings, raw JSON documents, or ``None`` (skipped).

    Returns:
        The merged, immutable configuration.

    Raises:
        ConfigMergeError: if any fragment is not an object or carries a
            non-string value for a recognized key. All offending fields
            are reported at once.
    """
    merged: dict[str, str] = {}
    invalid: list[str] = []

    for index, fragment in enumerate(fragments):
        raw: Any = fragment
        if isinstance(raw, (str, bytes)):
            if not raw.strip():
                continue
            try:
                raw = json.loads(raw)
            except ValueError:
                invalid.append(f"fragments[{index}]")
                continue
        if raw is None:
            continue
        if not isinstance(raw, dict):
            invalid.append(f"fragments[{index}]")
            continue

        try:
            parsed = _Fragment.model_validate(raw)
        except ValidationError as exc:
            for err in exc.errors():
                loc = ".".join(str(part) for part in err["loc"])
                invalid.append(f"fragments[{index}].{loc}")
            continue

        for key, value in parsed.model_dump(exclude_none=True).items():
            if value:
                merged[key] = value

    if invalid:
        raise ConfigMergeError(invalid)

    return SourceConfig(**merged)
