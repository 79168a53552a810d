"""Loader manifests: reconf.yaml files describing loaders per environment."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .errors import ManifestError

logger = logging.getLogger(__name__)

MANIFEST_NAME = "reconf.yaml"
FORMATS = ("json", "yaml", "ini", "env")

_SUFFIX_FORMATS = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".ini": "ini",
    ".env": "env",
}


def format_for_suffix(name: str) -> Optional[str]:
    """Guess a format from a file name or URL path, e.g. ``app.yml`` -> yaml."""
    p = Path(name.split("?", 1)[0])
    if p.name == ".env":
        return "env"
    return _SUFFIX_FORMATS.get(p.suffix.lower())


def find_manifest(start: Path) -> Optional[Path]:
    """Return the nearest reconf.yaml in ``start`` or one of its parents."""
    for directory in (start, *start.parents):
        candidate = directory / MANIFEST_NAME
        if candidate.is_file():
            return candidate
    return None


def _expect_mapping(value: Any, what: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ManifestError(f"{what} must be a mapping, got {type(value).__name__}")
    return value


class ManifestLoader:
    """Reads the loader manifest (reconf.yaml) of a project.

    The manifest is parsed once, on first use. Its top level must be a
    mapping with an ``environments`` mapping of environment names to
    ``{type, loaders}`` entries.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize manifest loader.

        Args:
            config_path: Path to the manifest. If None, looks for reconf.yaml
                in the current directory and its parents.
        """
        if config_path is None:
            self.config_path = find_manifest(Path.cwd())
        else:
            path = Path(config_path)
            self.config_path = path if path.exists() else None
        self._config: Optional[Dict[str, Any]] = None

    def load(self) -> Dict[str, Any]:
        """Load the manifest.

        Returns:
            Parsed manifest, or an empty dict if there is none or it cannot
            be read.

        Raises:
            ManifestError: If the manifest is not valid YAML or its top
                level is not a mapping.
        """
        if self._config is None:
            self._config = self._read()
        return self._config

    def _read(self) -> Dict[str, Any]:
        if self.config_path is None:
            return {}
        try:
            text = self.config_path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning("Could not read %s: %s", self.config_path, e)
            return {}
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ManifestError(
                f"Invalid {MANIFEST_NAME} at {self.config_path}: {e}"
            ) from e
        return _expect_mapping(data, f"{MANIFEST_NAME} at {self.config_path}")

    def get_environment_config(self, environment_name: str) -> Optional[Dict[str, Any]]:
        environments = _expect_mapping(self.load().get("environments"), "'environments'")
        if environments.get(environment_name) is None:
            return None
        return _expect_mapping(
            environments[environment_name], f"environment {environment_name!r}"
        )

    def get_loaders(self, environment_name: str) -> List[Any]:
        env_config = self.get_environment_config(environment_name)
        if env_config is None:
            return []
        loaders = env_config.get("loaders") or []
        if not isinstance(loaders, list):
            raise ManifestError(
                f"'loaders' of environment {environment_name!r} must be a list"
            )
        return loaders

    def get_type(self, environment_name: str) -> Optional[str]:
        """Return the ``module:Class`` path of the environment's config type."""
        env_config = self.get_environment_config(environment_name)
        if env_config is None:
            return None
        return env_config.get("type")

    def parse_loader(self, entry: Any) -> Dict[str, Any]:
        """Parse a loader entry into its components.

        Args:
            entry: Raw loader entry from the manifest.

        Returns:
            Dictionary with ``kind`` (path, uri, url or env), ``target``,
            ``format`` and the optional ``watch``, ``interval``, ``prefix``
            and ``headers``.

        Raises:
            ManifestError: If the entry is not a mapping or names no
                target, if its format is unknown, or if it asks to watch
                something that is not a file.
        """
        if not isinstance(entry, dict):
            raise ManifestError(f"Loader entry must be a mapping, got {entry!r}")
        result: Dict[str, Any] = {}

        if "path" in entry:
            result["kind"] = "path"
            result["target"] = Path(entry["path"])
            result["format"] = entry.get("format") or format_for_suffix(str(entry["path"]))
        elif "uri" in entry:
            result["kind"] = "uri"
            result["target"] = entry["uri"]
            result["format"] = entry.get("format", "env")
        elif "url" in entry:
            result["kind"] = "url"
            result["target"] = entry["url"]
            result["format"] = entry.get("format") or format_for_suffix(entry["url"])
        elif entry.get("env"):
            result["kind"] = "env"
            result["target"] = None
            result["format"] = "env"
        else:
            raise ManifestError("Loader must have one of 'path', 'uri', 'url' or 'env'")

        if result["format"] not in FORMATS:
            raise ManifestError(
                f"Unknown format {result['format']!r} for loader {entry!r}; "
                f"expected one of {', '.join(FORMATS)}"
            )

        if entry.get("watch"):
            if result["kind"] != "path":
                raise ManifestError(f"Only 'path' loaders can be watched: {entry!r}")
            result["watch"] = True
            if "interval" in entry:
                result["interval"] = float(entry["interval"])

        if "prefix" in entry:
            result["prefix"] = entry["prefix"]
        if "headers" in entry:
            result["headers"] = dict(entry["headers"])

        return result
