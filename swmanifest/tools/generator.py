"""Compile a cache configuration and a file snapshot into a control manifest."""
import logging
import re
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Mapping, Optional, Union

from swmanifest.errors import ConfigurationError, HashRetrievalError
from swmanifest.models.config import CacheQueryOptions, Config
from swmanifest.models.manifest import (
    CONFIG_VERSION,
    Manifest,
    ManifestAssetGroup,
    ManifestCacheQueryOptions,
    ManifestDataGroup,
    NavigationUrl,
)
from swmanifest.tools.duration import parse_duration_to_ms
from swmanifest.tools.filesystem import Filesystem
from swmanifest.tools.glob import CompiledPattern, glob_list_to_matcher, matches
from swmanifest.tools.manifest_io import load_config_data
from swmanifest.tools.urls import join_urls, url_to_regex

logger = logging.getLogger(__name__)

DEFAULT_NAVIGATION_URLS = [
    "/**",  # Include all URLs.
    "!/**/*.*",  # Exclude URLs to files (an extension in the last segment).
    "!/**/*__*",  # Exclude URLs containing `__` in the last segment.
    "!/**/*__*/**",  # Exclude URLs containing `__` in any other segment.
]


class Generator:
    """
    Consumes cache configuration files and processes them into control manifests.

    Args:
        fs: File snapshot collaborator exposing `list` and `hash`
        base_href: Base path the application is served from
        max_workers: Thread pool size for hashing (executor default if None)
        progress_callback: Optional callback(file) invoked once per hashed file
    """

    def __init__(
        self,
        fs: Filesystem,
        base_href: str,
        max_workers: Optional[int] = None,
        progress_callback: Optional[Callable[[str], None]] = None,
    ):
        self.fs = fs
        self.base_href = base_href
        self.max_workers = max_workers
        self.progress_callback = progress_callback

    def process(self, config: Union[Config, Mapping[str, Any]]) -> Manifest:
        """Generate a manifest; any failure propagates and nothing is returned."""
        if not isinstance(config, Config):
            config = load_config_data(config)

        asset_groups, hash_table = self.process_asset_groups(config)
        data_groups = self.process_data_groups(config)
        navigation_urls = process_navigation_urls(self.base_href, config.navigation_urls)

        manifest = Manifest(
            config_version=CONFIG_VERSION,
            timestamp=int(time.time() * 1000),
            app_data=config.app_data,
            index=join_urls(self.base_href, config.index),
            asset_groups=asset_groups,
            data_groups=data_groups,
            hash_table=hash_table,
            navigation_urls=navigation_urls,
            navigation_request_strategy=config.navigation_request_strategy or "performance",
        )
        logger.info(
            f"Generated manifest: {len(asset_groups)} asset group(s), "
            f"{len(data_groups)} data group(s), {len(hash_table)} hashed file(s)"
        )
        return manifest

    def process_asset_groups(self, config: Config) -> tuple[list[ManifestAssetGroup], dict[str, str]]:
        """
        Partition the snapshot into asset groups and hash every matched file.

        A file belongs to the first group (in config order) whose file globs
        match it; later groups never see it again.

        Returns:
            (asset groups, hash table keyed by normalized URL in sorted order)
        """
        # Retrieve all files of the build.
        all_files = self.fs.list("/")
        logger.debug(f"Snapshot contains {len(all_files)} files")

        seen: set[str] = set()
        files_per_group = []

        # Compute which files belong to each asset group.
        for group in config.asset_groups:
            if group.resources.versioned_files is not None:
                raise ConfigurationError(
                    f"Asset-group '{group.name}' uses the 'versionedFiles' option, "
                    "which is no longer supported. Use 'files' instead.",
                    group_name=group.name,
                )

            try:
                matched_files, seen = _claim_files(all_files, group.resources.files, seen)
            except re.error as e:
                raise ConfigurationError(
                    f"Asset-group '{group.name}' has an invalid file pattern: {e}",
                    group_name=group.name,
                ) from e
            files_per_group.append((group, matched_files))
            logger.debug(f"Asset group '{group.name}' matched {len(matched_files)} files")

        # Compute hashes for all matched files and add them to the hash table.
        all_matched_files = sorted(file for _, files in files_per_group for file in files)
        all_matched_hashes = self._hash_files(all_matched_files)
        hash_table = {
            join_urls(self.base_href, file): file_hash
            for file, file_hash in zip(all_matched_files, all_matched_hashes)
        }

        asset_groups = [
            ManifestAssetGroup(
                name=group.name,
                install_mode=group.install_mode or "prefetch",
                update_mode=group.update_mode or group.install_mode or "prefetch",
                cache_query_options=build_cache_query_options(group.cache_query_options),
                urls=[join_urls(self.base_href, file) for file in matched_files],
                patterns=[url_to_regex(url, self.base_href, True) for url in group.resources.urls],
            )
            for group, matched_files in files_per_group
        ]
        return asset_groups, {key: hash_table[key] for key in sorted(hash_table)}

    def process_data_groups(self, config: Config) -> list[ManifestDataGroup]:
        """Map runtime URL patterns to their caching parameters (no file access)."""
        data_groups = []
        for group in config.data_groups:
            cache_config = group.cache_config
            data_groups.append(
                ManifestDataGroup(
                    name=group.name,
                    patterns=[url_to_regex(url, self.base_href, True) for url in group.urls],
                    strategy=cache_config.strategy or "performance",
                    max_size=cache_config.max_size,
                    max_age=parse_duration_to_ms(cache_config.max_age),
                    timeout_ms=parse_duration_to_ms(cache_config.timeout) if cache_config.timeout else None,
                    cache_query_options=build_cache_query_options(group.cache_query_options),
                    version=group.version if group.version is not None else 1,
                )
            )
        return data_groups

    def _hash_files(self, files: list[str]) -> list[str]:
        """Hash files concurrently; the first failure cancels the rest and is raised."""
        if not files:
            return []

        logger.info(f"Hashing {len(files)} files...")
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(self.fs.hash, file) for file in files]
            hashes = []
            for file, future in zip(files, futures):
                try:
                    hashes.append(future.result())
                except Exception as e:
                    for pending in futures:
                        pending.cancel()
                    raise HashRetrievalError(file, str(e)) from e
                if self.progress_callback:
                    self.progress_callback(file)
        return hashes


def _claim_files(all_files: list[str], globs: list[str], seen: set[str]) -> tuple[list[str], set[str]]:
    """Files matching `globs` not already in `seen`, sorted, plus the grown seen set."""
    file_matcher = glob_list_to_matcher(globs)
    matched_files = sorted(file for file in all_files if file_matcher(file) and file not in seen)
    return matched_files, seen | set(matched_files)


def process_navigation_urls(base_href: str, urls: Optional[list[str]] = None) -> list[NavigationUrl]:
    """
    Compile the navigation allow/deny list.

    Entries prefixed with `!` are negative. `?` stays a wildcard here, since
    these are path patterns rather than URLs with query strings.
    """
    if urls is None:
        urls = DEFAULT_NAVIGATION_URLS

    navigation_urls = []
    for url in urls:
        positive = not url.startswith("!")
        url = url if positive else url[1:]
        navigation_urls.append(NavigationUrl(positive=positive, regex=f"^{url_to_regex(url, base_href)}$"))
    return navigation_urls


def navigation_matches(url: str, navigation_urls: list[NavigationUrl]) -> bool:
    """Whether a navigation to `url` is governed by the compiled list."""
    patterns = [CompiledPattern(positive=entry.positive, regex=entry.regex) for entry in navigation_urls]
    return matches(url, patterns)


def build_cache_query_options(in_options: Optional[CacheQueryOptions]) -> ManifestCacheQueryOptions:
    """`ignoreVary: true` unless the declared options override it."""
    options = {"ignoreVary": True}
    if in_options is not None:
        options.update(in_options.model_dump(by_alias=True, exclude_none=True))
    return ManifestCacheQueryOptions.model_validate(options)
