# File: setup_spark/config.py
import os
import tempfile

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _input(name: str) -> AliasChoices:
    # The runner exports `INPUT_SPARK-VERSION`, composite actions can only pass `INPUT_SPARK_VERSION`
    upper = name.upper()
    return AliasChoices(f"INPUT_{upper}", f"INPUT_{upper.replace('-', '_')}")


class Settings(BaseSettings):
    # Action inputs
    spark_version: str = Field(..., validation_alias=_input("spark-version"))
    spark_url: str = Field("", validation_alias=_input("spark-url"))
    hadoop_version: str = Field(..., validation_alias=_input("hadoop-version"))
    scala_version: str = Field("", validation_alias=_input("scala-version"))
    py4j_version: str = Field(..., validation_alias=_input("py4j-version"))

    # Runner
    workspace: str = Field("/home/runner/work", validation_alias="GITHUB_WORKSPACE")
    tool_cache: str = Field(
        os.path.join(tempfile.gettempdir(), "toolcache"), validation_alias="RUNNER_TOOL_CACHE"
    )
    temp_dir: str = Field(tempfile.gettempdir(), validation_alias="RUNNER_TEMP")

    # Pydantic V2 Config
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("spark_version", "spark_url", "hadoop_version", "scala_version", "py4j_version")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    @field_validator("workspace")
    @classmethod
    def _default_workspace(cls, value: str) -> str:
        return value or "/home/runner/work"

    @property
    def scala_suffix(self) -> str:
        return f"-scala{self.scala_version}" if self.scala_version else ""

    @property
    def cache_version(self) -> str:
        """Tool cache key, e.g. `3.5.0-bin-hadoop3-scala2.13`."""
        return f"{self.spark_version}-bin-hadoop{self.hadoop_version}{self.scala_suffix}"
