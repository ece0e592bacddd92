"""
npm registry client: look up a package's dist-tag.

Only the packument's ``dist-tags`` map is read.  The canary tag of the
framework's core package is the version every framework dependency is
pinned to.
"""

from __future__ import annotations

import json
import logging
import urllib.request

from rsc_quickstart import __version__
from rsc_quickstart.core.errors import RegistryError
from rsc_quickstart.core.models.settings import DEFAULT_REGISTRY_URL

logger = logging.getLogger(__name__)


class NpmRegistryClient:
    """Minimal read-only npm registry client."""

    def __init__(self, registry_url: str = DEFAULT_REGISTRY_URL, *, timeout: float = 60.0) -> None:
        self.registry_url = registry_url.rstrip("/") + "/"
        self._timeout = timeout

    def packument_url(self, package: str) -> str:
        return self.registry_url + package

    def packument(self, package: str) -> dict:
        """Fetch the package document.

        Raises:
            RegistryError: Network failure or a non-object JSON body.
        """
        url = self.packument_url(package)
        logger.debug("Fetching %s", url)
        try:
            req = urllib.request.Request(
                url,
                headers={
                    "Accept": "application/json",
                    "User-Agent": f"rsc-quickstart/{__version__}",
                },
            )
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                data = json.loads(resp.read())
        except json.JSONDecodeError as e:
            raise RegistryError(f"Invalid response for {package}: {e}") from e
        except (OSError, ValueError) as e:
            raise RegistryError(f"Failed to fetch {package} from the registry: {e}") from e

        if not isinstance(data, dict):
            raise RegistryError(f"Invalid response for {package}: expected an object")
        return data

    def dist_tag(self, package: str, tag: str = "canary") -> str:
        """Return the version ``tag`` points to for ``package``.

        Raises:
            RegistryError: The package has no such tag.
        """
        tags = self.packument(package).get("dist-tags")
        version = tags.get(tag) if isinstance(tags, dict) else None
        if not isinstance(version, str) or not version:
            raise RegistryError(f"{package} has no '{tag}' dist-tag")
        return version
