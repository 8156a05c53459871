"""Cache configuration document (the `ngsw-config.json` input)."""
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from swmanifest.tools.duration import parse_duration_to_ms


class ConfigModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class CacheQueryOptions(ConfigModel):
    """Overrides merged on top of the `ignoreVary: true` default."""
    ignore_search: Optional[bool] = Field(None, alias="ignoreSearch")
    ignore_vary: Optional[bool] = Field(None, alias="ignoreVary")


class AssetResources(ConfigModel):
    """Which build files and runtime URLs belong to an asset group."""
    files: list[str] = Field(default_factory=list)
    urls: list[str] = Field(default_factory=list)
    # Retired; kept only so generation can reject it by name.
    versioned_files: Optional[list[str]] = Field(None, alias="versionedFiles")


class AssetGroup(ConfigModel):
    """A bundle of build output cached under one install/update policy."""
    name: str
    install_mode: Optional[Literal["prefetch", "lazy"]] = Field(None, alias="installMode")
    update_mode: Optional[Literal["prefetch", "lazy"]] = Field(None, alias="updateMode")
    resources: AssetResources = Field(default_factory=AssetResources)
    cache_query_options: Optional[CacheQueryOptions] = Field(None, alias="cacheQueryOptions")

    @model_validator(mode="before")
    @classmethod
    def lift_flat_resources(cls, data: Any) -> Any:
        """Accept `files`/`urls` declared directly on the group."""
        if not isinstance(data, dict):
            return data
        flat_keys = [k for k in ("files", "urls", "versionedFiles", "versioned_files") if k in data]
        if not flat_keys:
            return data
        resources = data.get("resources")
        if resources is not None and not isinstance(resources, dict):
            # Leave a malformed `resources` for field validation to report.
            return data
        data = dict(data)
        resources = dict(resources or {})
        for key in flat_keys:
            resources.setdefault(key, data.pop(key))
        data["resources"] = resources
        return data


class DataCacheConfig(ConfigModel):
    """Runtime caching policy for a data group."""
    strategy: Optional[Literal["performance", "freshness"]] = None
    max_size: int = Field(..., alias="maxSize")
    max_age: str = Field(..., alias="maxAge")
    timeout: Optional[str] = None

    @field_validator("max_size")
    @classmethod
    def validate_max_size(cls, v: int) -> int:
        """Ensure size is non-negative."""
        if v < 0:
            raise ValueError("maxSize must be non-negative")
        return v

    @field_validator("max_age", "timeout")
    @classmethod
    def validate_duration(cls, v: Optional[str]) -> Optional[str]:
        """Fail fast on durations the generator could not parse."""
        if v is not None:
            parse_duration_to_ms(v)
        return v


class DataGroup(ConfigModel):
    """Runtime URL patterns (API-like endpoints) and how to cache them."""
    name: str
    urls: list[str]
    cache_config: DataCacheConfig = Field(..., alias="cacheConfig")
    version: Optional[int] = None
    cache_query_options: Optional[CacheQueryOptions] = Field(None, alias="cacheQueryOptions")


class Config(ConfigModel):
    """Top-level cache configuration."""
    index: str
    app_data: Optional[Any] = Field(None, alias="appData")
    asset_groups: list[AssetGroup] = Field(default_factory=list, alias="assetGroups")
    data_groups: list[DataGroup] = Field(default_factory=list, alias="dataGroups")
    navigation_urls: Optional[list[str]] = Field(None, alias="navigationUrls")
    navigation_request_strategy: Optional[Literal["freshness", "performance"]] = Field(
        None, alias="navigationRequestStrategy"
    )
