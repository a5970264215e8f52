# File: setup_spark/runner/tool_cache.py
import os
import platform
import shutil
import tarfile
import uuid
from typing import List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

CHUNK_SIZE = 1024 * 1024

# platform.machine() -> names used by the runner tool cache
ARCH_NAMES = {
    "x86_64": "x64",
    "amd64": "x64",
    "i386": "x32",
    "i686": "x32",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "arm",
}


def get_robust_session():
    session = requests.Session()
    retry = Retry(
        total=3,
        read=3,
        connect=3,
        backoff_factor=2,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["GET"],
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers.update({"User-Agent": "setup-spark"})
    return session


def runner_arch() -> str:
    machine = platform.machine().lower()
    return ARCH_NAMES.get(machine, machine)


def download_tool(url: str, temp_dir: str, timeout: int = 60) -> str:
    """
    Downloads `url` into a fresh file under `temp_dir` and returns its path.
    Raises requests.HTTPError on a non-2xx answer.
    """
    os.makedirs(temp_dir, exist_ok=True)
    path = os.path.join(temp_dir, str(uuid.uuid4()))

    with get_robust_session() as session:
        with session.get(url, stream=True, timeout=timeout) as r:
            r.raise_for_status()
            with open(path, "wb") as f:
                for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
                    f.write(chunk)
    return path


def _member_root(name: str) -> str:
    name = name[2:] if name.startswith("./") else name
    return name.split("/", 1)[0]


def extract_tar(file: str, dest: str) -> List[str]:
    """
    Extracts the tarball into `dest` and returns the sorted top-level entries
    it unpacked, e.g. `["spark-3.5.0-bin-hadoop3"]`.
    """
    os.makedirs(dest, exist_ok=True)
    roots = set()
    with tarfile.open(file, "r:*") as tar:
        # Single pass over the stream, an archive is several hundred MB
        for member in tar:
            roots.add(_member_root(member.name))
            tar.extract(member, dest, filter="data")
    roots.discard("")
    roots.discard(".")
    return sorted(roots)


def _cache_path(cache_root: str, tool: str, version: str, arch: str) -> str:
    return os.path.join(cache_root, tool, version, arch)


def cache_dir(source: str, tool: str, version: str, cache_root: str, arch: Optional[str] = None) -> str:
    """
    Copies the tree at `source` into `<cache_root>/<tool>/<version>/<arch>`
    and marks the entry complete. Returns the cached path.
    """
    arch = arch or runner_arch()
    if not os.path.isdir(source):
        raise NotADirectoryError(f"sourceDir is not a directory: {source}")

    dest = _cache_path(cache_root, tool, version, arch)
    marker = f"{dest}.complete"
    # Drop any previous (possibly half written) entry
    if os.path.exists(marker):
        os.remove(marker)
    shutil.rmtree(dest, ignore_errors=True)

    shutil.copytree(source, dest, symlinks=True)
    with open(marker, "w", encoding="utf-8"):
        pass
    return dest
