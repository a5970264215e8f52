# File: tests/conftest.py
import io
import os
import tarfile

import pytest

from setup_spark.config import Settings

EXPORTED = [
    "SPARK_HOME",
    "HADOOP_VERSION",
    "APACHE_SPARK_VERSION",
    "PYSPARK_PYTHON",
    "PYSPARK_DRIVER_PYTHON",
    "PYTHONPATH",
    "SPARK_OPTS",
]

ALIASES = {
    "spark_version": "INPUT_SPARK_VERSION",
    "spark_url": "INPUT_SPARK_URL",
    "hadoop_version": "INPUT_HADOOP_VERSION",
    "scala_version": "INPUT_SCALA_VERSION",
    "py4j_version": "INPUT_PY4J_VERSION",
    "workspace": "GITHUB_WORKSPACE",
    "tool_cache": "RUNNER_TOOL_CACHE",
    "temp_dir": "RUNNER_TEMP",
}


def make_spark_archive(path, root="spark-3.5.0-bin-hadoop3", with_submit=True):
    """Builds a tiny Spark-like .tgz with `root/` as its only top-level directory, flat when root is None."""
    prefix = f"{root}/" if root else ""

    def add_dir(tar, name):
        info = tarfile.TarInfo(name)
        info.type = tarfile.DIRTYPE
        info.mode = 0o755
        tar.addfile(info)

    def add_file(tar, name, content, mode=0o644):
        info = tarfile.TarInfo(name)
        info.size = len(content)
        info.mode = mode
        tar.addfile(info, io.BytesIO(content))

    with tarfile.open(path, "w:gz") as tar:
        if root:
            add_dir(tar, root)
        add_dir(tar, f"{prefix}bin")
        add_dir(tar, f"{prefix}python")
        add_file(tar, f"{prefix}python/pyspark.py", b"")
        add_file(tar, f"{prefix}RELEASE", b"Spark 3.5.0\n")
        if with_submit:
            add_file(tar, f"{prefix}bin/spark-submit", b"#!/bin/sh\n", mode=0o755)
    return str(path)


@pytest.fixture
def runner_env(tmp_path, monkeypatch):
    """Runner files and a scratch environment; everything is restored after the test."""
    files = {}
    for name in ("GITHUB_ENV", "GITHUB_PATH", "GITHUB_OUTPUT"):
        f = tmp_path / name.lower()
        f.write_text("")
        monkeypatch.setenv(name, str(f))
        files[name] = f

    monkeypatch.setenv("PATH", os.environ.get("PATH", ""))
    for name in EXPORTED:
        # setenv first so teardown also removes values the test exported
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return files


@pytest.fixture
def workspace(tmp_path):
    ws = tmp_path / "runner" / "work"
    ws.mkdir(parents=True)
    return ws


@pytest.fixture
def make_settings(tmp_path, workspace, monkeypatch):
    for name in ("GITHUB_WORKSPACE", "RUNNER_TOOL_CACHE", "RUNNER_TEMP"):
        monkeypatch.delenv(name, raising=False)

    def _make(**overrides):
        values = {
            "spark_version": "3.5.0",
            "hadoop_version": "3",
            "scala_version": "",
            "py4j_version": "0.10.9.7",
            "workspace": str(workspace),
            "tool_cache": str(tmp_path / "toolcache"),
            "temp_dir": str(tmp_path / "temp"),
        }
        values.update(overrides)
        # Settings only answers to the runner variable names
        return Settings(_env_file=None, **{ALIASES[k]: v for k, v in values.items()})

    return _make


@pytest.fixture
def spark_archive(tmp_path):
    def _make(name="spark.tgz", **kwargs):
        return make_spark_archive(tmp_path / name, **kwargs)

    return _make
