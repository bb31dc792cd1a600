"""Build the shell command that runs a single Perl test."""

import os
import re
from collections.abc import Sequence

from test2_subtest_filter.models.target import BuiltCommand, ExecutionTarget

TEST_METHOD_VAR = "TEST_METHOD"
SUBTEST_FILTER_VAR = "SUBTEST_FILTER"

CONTAINER_EXEC_PATTERN = re.compile(
    r"^(docker[\s-]compose\s+exec|docker\s+exec)\s+(\S+)\s+(.*)$",
    re.IGNORECASE,
)


def filter_variables(target: ExecutionTarget) -> Sequence[tuple[str, str]]:
    """Return the filter variables that apply, TEST_METHOD first."""
    variables: list[tuple[str, str]] = []
    if target.class_method:
        variables.append((TEST_METHOD_VAR, target.class_method))
    if target.filter_path:
        variables.append((SUBTEST_FILTER_VAR, target.filter_path))
    return variables


def shell_quote(value: str) -> str:
    """Wrap value in single quotes, escaping embedded single quotes."""
    return "'" + value.replace("'", "'\\''") + "'"


def build_test_command(target: ExecutionTarget) -> BuiltCommand:
    """Build the command, display string and environment for a target.

    Plain runner commands get the filters through the process environment and
    show them as a ``KEY='value'`` prefix. ``docker exec`` and ``docker compose
    exec`` commands get them through ``env`` inside the container, since the
    local environment does not reach it.
    """
    variables = filter_variables(target)
    environment = dict(os.environ)
    environment.update(variables)

    if match := CONTAINER_EXEC_PATTERN.match(target.base_command):
        docker_cmd, container, rest_command = match.groups()
        env_part = " ".join(f"{key}={shell_quote(value)}" for key, value in variables)
        command = (
            f"{docker_cmd} {container} env {env_part} "
            f"{rest_command} {target.relative_file_path}"
        )
        return BuiltCommand(
            executable_command=command,
            display_command=command,
            environment=environment,
        )

    command = f"{target.base_command} {target.relative_file_path}"
    env_prefix = "".join(f"{key}='{value}' " for key, value in variables)
    return BuiltCommand(
        executable_command=command,
        display_command=f"{env_prefix}{command}",
        environment=environment,
    )
