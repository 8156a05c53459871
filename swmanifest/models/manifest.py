"""Control manifest consumed by the runtime cache agent (the `ngsw.json` output)."""
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer

CONFIG_VERSION = 1


class ManifestModel(BaseModel):
    """Serialized with camelCase keys in declaration order."""
    model_config = ConfigDict(populate_by_name=True)

    @model_serializer(mode="wrap")
    def drop_absent_fields(self, handler):
        # Absent optionals (appData, timeoutMs, ignoreSearch) are left out of the document.
        data = handler(self)
        return {key: value for key, value in data.items() if value is not None}


class ManifestCacheQueryOptions(ManifestModel):
    ignore_vary: bool = Field(True, alias="ignoreVary")
    ignore_search: Optional[bool] = Field(None, alias="ignoreSearch")


class ManifestAssetGroup(ManifestModel):
    """Asset group with its resolved file URLs and URL patterns."""
    name: str
    install_mode: Literal["prefetch", "lazy"] = Field("prefetch", alias="installMode")
    update_mode: Literal["prefetch", "lazy"] = Field("prefetch", alias="updateMode")
    cache_query_options: ManifestCacheQueryOptions = Field(
        default_factory=ManifestCacheQueryOptions, alias="cacheQueryOptions"
    )
    urls: list[str] = Field(default_factory=list)
    patterns: list[str] = Field(default_factory=list)


class ManifestDataGroup(ManifestModel):
    """Data group with durations resolved to milliseconds."""
    name: str
    patterns: list[str] = Field(default_factory=list)
    strategy: Literal["performance", "freshness"] = "performance"
    max_size: int = Field(..., alias="maxSize")
    max_age: int = Field(..., alias="maxAge")
    timeout_ms: Optional[int] = Field(None, alias="timeoutMs")
    cache_query_options: ManifestCacheQueryOptions = Field(
        default_factory=ManifestCacheQueryOptions, alias="cacheQueryOptions"
    )
    version: int = 1


class NavigationUrl(ManifestModel):
    """One entry of the navigation allow/deny list."""
    positive: bool
    regex: str


class Manifest(ManifestModel):
    """Versioned control manifest."""
    config_version: int = Field(CONFIG_VERSION, alias="configVersion")
    timestamp: int  # epoch milliseconds
    app_data: Optional[Any] = Field(None, alias="appData")
    index: str
    asset_groups: list[ManifestAssetGroup] = Field(default_factory=list, alias="assetGroups")
    data_groups: list[ManifestDataGroup] = Field(default_factory=list, alias="dataGroups")
    hash_table: dict[str, str] = Field(default_factory=dict, alias="hashTable")
    navigation_urls: list[NavigationUrl] = Field(default_factory=list, alias="navigationUrls")
    navigation_request_strategy: Literal["freshness", "performance"] = Field(
        "performance", alias="navigationRequestStrategy"
    )

    @field_validator("config_version")
    @classmethod
    def validate_config_version(cls, v: int) -> int:
        """The schema version is a constant, not derived from the config."""
        if v != CONFIG_VERSION:
            raise ValueError(f"configVersion must be {CONFIG_VERSION}")
        return v

    @field_validator("hash_table")
    @classmethod
    def order_hash_table(cls, v: dict[str, str]) -> dict[str, str]:
        """Keep keys in lexicographic order for reproducible output."""
        return {key: v[key] for key in sorted(v)}
