# File: setup_spark/__main__.py
import sys

from setup_spark.config import Settings
from setup_spark.installer import DOWNLOADS_PAGE, log, setup_spark
from setup_spark.runner.commands import set_failed


def main() -> int:
    try:
        version = setup_spark(Settings())
        log(f"🏁 Spark {version} is ready")
        return 0
    except Exception as e:
        print()
        log(
            "❌ Issue installing Spark: check if the Spark version and Hadoop versions you are using "
            f"is part of the one proposed in the Spark download page at {DOWNLOADS_PAGE}"
        )
        print(repr(e))
        set_failed(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
