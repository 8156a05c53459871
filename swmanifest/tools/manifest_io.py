"""Manifest I/O: load configuration, save and load generated manifests."""
import json
import logging
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from swmanifest.errors import ConfigurationError
from swmanifest.models.config import Config
from swmanifest.models.manifest import Manifest

logger = logging.getLogger(__name__)

_GROUP_KEYS = {
    "assetGroups": "asset_groups",
    "asset_groups": "asset_groups",
    "dataGroups": "data_groups",
    "data_groups": "data_groups",
}


def load_config(config_path: Path) -> Config:
    """Load and validate a cache configuration JSON file."""
    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Configuration file {config_path} is not valid JSON: {e}") from e

    return load_config_data(data)


def load_config_data(data: Mapping[str, Any]) -> Config:
    """
    Validate a configuration mapping.

    Raises:
        ConfigurationError: The document violates the schema. When the first
            error points into an asset or data group, the group is named.
    """
    try:
        return Config.model_validate(data)
    except ValidationError as e:
        group_name = _group_name_for_error(data, e)
        detail = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        if group_name:
            message = f"Invalid configuration in group '{group_name}': {detail}"
        else:
            message = f"Invalid configuration: {detail}"
        raise ConfigurationError(message, group_name=group_name) from e


def _group_name_for_error(data: Any, error: ValidationError) -> Optional[str]:
    """Name of the group the first validation error points into, if any."""
    if not isinstance(data, Mapping):
        return None
    for err in error.errors():
        loc = err["loc"]
        if len(loc) < 2 or loc[0] not in _GROUP_KEYS or not isinstance(loc[1], int):
            continue
        groups = data.get(loc[0], data.get(_GROUP_KEYS[loc[0]]))
        try:
            group = groups[loc[1]]
        except (TypeError, IndexError, KeyError):
            continue
        if isinstance(group, Mapping) and isinstance(group.get("name"), str):
            return group["name"]
    return None


def manifest_to_dict(manifest: Manifest) -> dict:
    """Canonical JSON-ready form with camelCase keys."""
    return manifest.model_dump(mode="json", by_alias=True)


def manifest_to_json(manifest: Manifest, indent: Optional[int] = 2) -> str:
    """Serialize a manifest; identical inputs give identical text apart from the timestamp."""
    return manifest.model_dump_json(by_alias=True, indent=indent)


def save_manifest(manifest: Manifest, manifest_path: Path) -> None:
    """Save manifest to JSON file atomically (write temp then replace)."""
    manifest_path.parent.mkdir(parents=True, exist_ok=True)

    # Write to temp file first
    temp_path = manifest_path.with_suffix(".tmp")
    temp_path.write_text(manifest_to_json(manifest), encoding="utf-8")

    # Atomic replace
    temp_path.replace(manifest_path)
    logger.info(f"Manifest written to {manifest_path}")


def load_manifest(manifest_path: Path) -> Optional[Manifest]:
    """Load manifest from JSON file. Returns None if not found or invalid."""
    if not manifest_path.exists():
        return None

    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
        return Manifest.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Ignoring unreadable manifest {manifest_path}: {e}")
        return None
