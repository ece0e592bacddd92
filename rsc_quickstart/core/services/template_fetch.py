"""
Template fetch: download the framework archive and carve out the template.

The whole repository zip is downloaded, unpacked into a temp dir with
its top-level ``<repo>-<branch>/`` directory stripped, and one fixture
directory is moved to the destination.  The temp dir is always removed.
"""

from __future__ import annotations

import io
import logging
import os
import shutil
import stat
import tempfile
import urllib.request
import zipfile
import zlib
from collections.abc import Callable
from pathlib import Path

from rsc_quickstart import __version__
from rsc_quickstart.core.errors import DownloadError, TemplateError

logger = logging.getLogger(__name__)

USER_AGENT = f"rsc-quickstart/{__version__}"

Downloader = Callable[[str, float], bytes]


def download_archive(url: str, timeout: float = 60.0) -> bytes:
    """Fetch ``url`` and return the response body.

    Raises:
        DownloadError: On any network or HTTP failure.
    """
    logger.debug("Downloading %s", url)
    try:
        req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            data = resp.read()
    except (OSError, ValueError) as e:
        raise DownloadError(f"Download failed: {url}: {e}") from e
    logger.debug("Downloaded %d bytes", len(data))
    return data


def _toplevel_dir(names: list[str]) -> str | None:
    """The single directory every entry lives under, if there is one."""
    tops = {name.split("/", 1)[0] for name in names if name}
    if len(tops) != 1:
        return None
    top = tops.pop()
    if all(name == top + "/" or name.startswith(top + "/") for name in names):
        return top
    return None


def extract_archive(data: bytes, dest: Path, *, strip_toplevel: bool = True) -> None:
    """Unpack zip ``data`` into ``dest``.

    With ``strip_toplevel``, an archive whose entries all sit under one
    directory is unpacked as that directory's contents.  Unix permission
    bits and symlinks recorded in the archive are restored.

    Raises:
        DownloadError: Corrupt archive, or an entry would land outside ``dest``.
    """
    dest = Path(dest)
    try:
        dest.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DownloadError(f"Cannot create {dest}: {e}") from e
    root = dest.resolve()

    try:
        zf = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as e:
        raise DownloadError(f"Failed to extract zip: {e}") from e

    with zf:
        infos = zf.infolist()
        prefix = _toplevel_dir([i.filename for i in infos]) if strip_toplevel else None
        try:
            for info in infos:
                _extract_member(zf, info, root, prefix)
        except (zipfile.BadZipFile, zlib.error, OSError, UnicodeDecodeError) as e:
            raise DownloadError(f"Failed to extract zip: {e}") from e


def _extract_member(
    zf: zipfile.ZipFile,
    info: zipfile.ZipInfo,
    root: Path,
    prefix: str | None,
) -> None:
    name = info.filename
    if prefix is not None:
        name = name[len(prefix) + 1:]
    if not name:
        return

    target = (root / name).resolve()
    if target != root and root not in target.parents:
        raise DownloadError(f"Refusing to extract {info.filename!r} outside {root}")

    mode = info.external_attr >> 16
    if info.is_dir():
        target.mkdir(parents=True, exist_ok=True)
        return

    target.parent.mkdir(parents=True, exist_ok=True)
    if stat.S_ISLNK(mode):
        link = zf.read(info).decode("utf-8")
        if target.is_symlink() or target.exists():
            target.unlink()
        os.symlink(link, target)
        return

    with zf.open(info) as src, open(target, "wb") as out:
        shutil.copyfileobj(src, out)
    if mode & 0o777:
        os.chmod(target, mode & 0o777)


class TemplateSource:
    """Where the project template comes from.

    Args:
        url: Zip archive URL.
        template_path: Directory inside the (stripped) archive to keep.
        timeout: HTTP timeout in seconds.
        temp_prefix: Prefix for the scratch directory.
        downloader: ``(url, timeout) -> bytes``, swappable for testing.
        verbose: Log progress at INFO instead of DEBUG.
    """

    def __init__(
        self,
        url: str,
        template_path: str,
        *,
        timeout: float = 60.0,
        temp_prefix: str = "rwjs-rsc-quickstart-",
        downloader: Downloader = download_archive,
        verbose: bool = False,
    ) -> None:
        self.url = url
        self.template_path = template_path
        self._timeout = timeout
        self._temp_prefix = temp_prefix
        self._downloader = downloader
        self._log_level = logging.INFO if verbose else logging.DEBUG

    def materialize(self, destination: Path) -> Path:
        """Download, unpack and move the template to ``destination``.

        Raises:
            DownloadError: Download or extraction failed.
            TemplateError: The archive has no ``template_path`` directory,
                or it can't be moved to ``destination``.
        """
        data = self._downloader(self.url, self._timeout)

        try:
            scratch = Path(tempfile.mkdtemp(prefix=self._temp_prefix))
        except OSError as e:
            raise TemplateError(f"Cannot create a scratch directory: {e}") from e

        try:
            logger.log(self._log_level, "Extracting into %s", scratch)
            extract_archive(data, scratch, strip_toplevel=True)

            source = scratch / self.template_path
            if not source.is_dir():
                raise TemplateError(
                    f"Template '{self.template_path}' not found in {self.url}"
                )

            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                shutil.move(str(source), str(destination))
            except OSError as e:
                raise TemplateError(f"Cannot move the template to {destination}: {e}") from e
        finally:
            shutil.rmtree(scratch, ignore_errors=True)

        return destination
