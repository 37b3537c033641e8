"""HTTP client that fetches artifacts from a Maven repository."""

from __future__ import annotations

import hashlib
import logging
import os
import time
from pathlib import Path
from typing import Optional

import httpx

from jarpatch.modules.jarreplace.domain import FetchFailed
from jarpatch.modules.jarreplace.domain.constants import CHECKSUM_SUFFIX, TEMP_SUFFIX
from jarpatch.settings import Settings

PROGRESS_CHUNK_BYTES = 5 * 1024 * 1024


class MavenDownloader:
    """Download a single artifact to disk without ever exposing a partial file."""

    def __init__(self, settings: Settings, client: Optional[httpx.Client] = None) -> None:
        self.settings = settings
        self.log = logging.getLogger(self.__class__.__name__)
        auth = None
        if settings.repository_username and settings.repository_password:
            auth = (settings.repository_username, settings.repository_password)
        self._auth = auth
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=settings.http_timeout,
            verify=settings.http_verify_tls,
            follow_redirects=True,
        )

    def fetch(self, url: str, dest_path: Path, verify_checksum: bool = False) -> Path:
        """Download ``url`` to ``dest_path``.

        Bytes land in ``<dest_path>.tmp`` first and are renamed into place
        only once the transfer completed, so ``dest_path`` is either absent or
        complete. Checksum verification is advisory: a mismatch is logged and
        the download is still kept.
        """
        dest_path = Path(dest_path)
        temp_path = dest_path.with_name(dest_path.name + TEMP_SUFFIX)
        self.log.info("Downloading %s -> %s", url, dest_path)
        start_time = time.time()
        try:
            dest_path.parent.mkdir(parents=True, exist_ok=True)
            downloaded, digest = self._stream_to_file(url, temp_path)
        except httpx.HTTPStatusError as exc:
            temp_path.unlink(missing_ok=True)
            raise FetchFailed(f"download failed with HTTP {exc.response.status_code}: {url}") from exc
        except httpx.HTTPError as exc:
            temp_path.unlink(missing_ok=True)
            raise FetchFailed(f"download failed: {url}: {exc}") from exc
        except OSError as exc:
            temp_path.unlink(missing_ok=True)
            raise FetchFailed(f"cannot write {temp_path}: {exc}") from exc

        if verify_checksum:
            self._verify_checksum(url, digest)

        try:
            os.replace(temp_path, dest_path)
        except OSError as exc:
            temp_path.unlink(missing_ok=True)
            raise FetchFailed(f"cannot move {temp_path} to {dest_path}: {exc}") from exc

        elapsed = max(time.time() - start_time, 1e-3)
        self.log.info(
            "Download completed %s (%d bytes, %.2f MB/s, %.2fs)",
            dest_path,
            downloaded,
            (downloaded / 1024 / 1024) / elapsed,
            elapsed,
        )
        return dest_path

    def _stream_to_file(self, url: str, target: Path) -> tuple[int, str]:
        sha1 = hashlib.sha1()
        downloaded = 0
        with self._client.stream("GET", url, auth=self._auth) as response:
            response.raise_for_status()
            total = int(response.headers.get("content-length") or 0)
            next_percent = 10
            next_bytes_logged = PROGRESS_CHUNK_BYTES
            with open(target, "wb") as fh:
                for chunk in response.iter_bytes(65536):
                    if not chunk:
                        continue
                    fh.write(chunk)
                    sha1.update(chunk)
                    downloaded += len(chunk)
                    if total:
                        percent = int(downloaded * 100 / total)
                        if percent >= next_percent:
                            self.log.debug("Download progress %s %s%% (%d/%d bytes)", url, percent, downloaded, total)
                            next_percent = (percent // 10 + 1) * 10
                    elif downloaded >= next_bytes_logged:
                        self.log.debug("Download progress %s %d bytes", url, downloaded)
                        next_bytes_logged += PROGRESS_CHUNK_BYTES
        return downloaded, sha1.hexdigest()

    def _verify_checksum(self, url: str, actual: str) -> bool:
        checksum_url = url + CHECKSUM_SUFFIX
        self.log.info("Verifying file checksum against %s", checksum_url)
        try:
            resp = self._client.get(checksum_url, auth=self._auth)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            self.log.warning("Checksum unavailable (%s), but continuing execution", exc)
            return False
        tokens = resp.text.split()
        expected = tokens[0].strip().lower() if tokens else ""
        if expected and expected == actual.lower():
            self.log.info("Checksum verification passed sha1=%s", actual)
            return True
        self.log.warning(
            "Checksum verification failed expected=%s actual=%s, but continuing execution",
            expected or "-",
            actual,
        )
        return False

    def close(self) -> None:
        # a client passed in by the caller stays open for the caller to close
        if self._owns_client:
            self._client.close()
