# File: setup_spark/runner/commands.py
"""
Workflow commands: how a step hands environment variables, PATH entries
and outputs back to the Actions runner.

Newer runners expose files (GITHUB_ENV, GITHUB_PATH, GITHUB_OUTPUT) that are
read after the step finishes. Without them we fall back to the legacy
`::command::` stdout protocol so the script still works on old runners and
locally.
"""
import os
import uuid


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def issue_command(command: str, message: str = "", **properties: str) -> None:
    cmd = f"::{command}"
    if properties:
        cmd += " " + ",".join(f"{k}={escape_property(str(v))}" for k, v in properties.items())
    print(f"{cmd}::{escape_data(str(message))}", flush=True)


def prepare_key_value(key: str, value: str) -> str:
    """Multiline-safe `key<<DELIM` record for GITHUB_ENV / GITHUB_OUTPUT."""
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    if delimiter in key:
        raise ValueError(f"Unexpected input: name should not contain the delimiter \"{delimiter}\"")
    if delimiter in value:
        raise ValueError(f"Unexpected input: value should not contain the delimiter \"{delimiter}\"")
    return f"{key}<<{delimiter}\n{value}\n{delimiter}"


def issue_file_command(env_name: str, message: str) -> bool:
    """Appends to the runner file named by `env_name`. False if the runner did not provide one."""
    file_path = os.environ.get(env_name)
    if not file_path:
        return False
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Missing file at path: {file_path}")
    with open(file_path, "a", encoding="utf-8") as f:
        f.write(message + "\n")
    return True


def export_variable(name: str, value: str) -> None:
    os.environ[name] = value
    if not issue_file_command("GITHUB_ENV", prepare_key_value(name, value)):
        issue_command("set-env", value, name=name)


def add_path(path: str) -> None:
    if not issue_file_command("GITHUB_PATH", path):
        issue_command("add-path", path)
    os.environ["PATH"] = f"{path}{os.pathsep}{os.environ.get('PATH', '')}"


def set_output(name: str, value: str) -> None:
    if not issue_file_command("GITHUB_OUTPUT", prepare_key_value(name, value)):
        print()
        issue_command("set-output", value, name=name)


def set_failed(message: str) -> None:
    # Exit status is left to the caller
    issue_command("error", message)
