# File: setup_spark/installer.py
import os
from datetime import datetime
from typing import Dict

from setup_spark.config import Settings
from setup_spark.runner import commands, tool_cache

ARCHIVE_URL = "https://archive.apache.org/dist/spark"
DOWNLOADS_PAGE = "https://spark.apache.org/downloads.html"

SPARK_OPTS = (
    "--driver-java-options=-Xms1024M "
    "--driver-java-options=-Xmx2048M "
    "--driver-java-options=-Dlog4j.logLevel=info"
)
PYSPARK_PYTHON = "python"


class SparkInstallError(Exception):
    pass


def log(message: str) -> None:
    print(f"{datetime.now().strftime('%H:%M:%S')} - {message}", flush=True)


def resolve_install_folder(workspace: str) -> str:
    """Parent of the workspace when we can use it, otherwise the workspace itself."""
    install_folder = os.path.dirname(workspace.rstrip("/")) or "/"
    if not os.access(install_folder, os.R_OK):
        log(f"⚠️ Using $GITHUB_WORKSPACE to store Spark ({install_folder} not writable)")
        install_folder = workspace
    log(f"📁 Spark will be installed to {install_folder}")
    return install_folder


def spark_dir_name(spark_version: str, hadoop_version: str, scala_version: str = "") -> str:
    scala_bit = f"-scala{scala_version}" if scala_version else ""
    return f"spark-{spark_version}-bin-hadoop{hadoop_version}{scala_bit}"


def build_spark_url(spark_version: str, hadoop_version: str, scala_version: str = "", spark_url: str = "") -> str:
    if spark_url:
        return spark_url
    name = spark_dir_name(spark_version, hadoop_version, scala_version)
    return f"{ARCHIVE_URL}/spark-{spark_version}/{name}.tgz"


def link_spark_home(install_folder: str, target: str) -> str:
    link = os.path.join(install_folder, "spark")
    # A persistent runner keeps the link from the previous job
    if os.path.islink(link):
        os.remove(link)
    os.symlink(target, link)
    return link


def install_spark(settings: Settings) -> str:
    """
    Downloads, extracts and caches Spark, then points `<install>/spark` at it.
    Returns SPARK_HOME.
    """
    install_folder = resolve_install_folder(settings.workspace)
    spark_url = build_spark_url(
        settings.spark_version, settings.hadoop_version, settings.scala_version, settings.spark_url
    )

    log(f"⬇️ Downloading the binary from {spark_url}")
    spark_tar_path = tool_cache.download_tool(spark_url, settings.temp_dir)

    roots = tool_cache.extract_tar(spark_tar_path, install_folder)
    # Trust the archive layout over the naming convention (custom spark-url builds differ)
    if len(roots) == 1:
        dir_name = roots[0]
    else:
        dir_name = spark_dir_name(settings.spark_version, settings.hadoop_version, settings.scala_version)
    spark_extracted_folder = os.path.join(install_folder, dir_name)
    if not os.path.isdir(spark_extracted_folder):
        raise SparkInstallError(f"The Spark binary was not properly downloaded from {spark_url}")

    cached_path = tool_cache.cache_dir(spark_extracted_folder, "spark", settings.cache_version, settings.tool_cache)
    commands.add_path(cached_path)
    link_spark_home(install_folder, spark_extracted_folder)

    spark_home = os.path.join(install_folder, "spark")
    if not os.path.exists(os.path.join(spark_home, "bin", "spark-submit")):
        raise SparkInstallError(f"The Spark binary was not properly downloaded from {spark_url}")
    return spark_home


def spark_environment(spark_home: str, settings: Settings) -> Dict[str, str]:
    return {
        "SPARK_HOME": spark_home,
        "HADOOP_VERSION": settings.hadoop_version,
        "APACHE_SPARK_VERSION": settings.spark_version,
        "PYSPARK_PYTHON": PYSPARK_PYTHON,
        "PYSPARK_DRIVER_PYTHON": PYSPARK_PYTHON,
        "PYTHONPATH": f"{spark_home}/python:{spark_home}/python/lib/py4j-{settings.py4j_version}-src.zip",
        "SPARK_OPTS": SPARK_OPTS,
    }


def setup_spark(settings: Settings) -> str:
    spark_home = install_spark(settings)

    log("✅ Binary downloaded, setting up environment variables")
    for name, value in spark_environment(spark_home, settings).items():
        commands.export_variable(name, value)

    commands.add_path(os.path.join(spark_home, "bin"))
    commands.set_output("spark-version", settings.spark_version)
    return settings.spark_version
