# topmark:header:start
#
#   project      : InjectMark
#   file         : exit_codes.py
#   file_relpath : src/injectmark/cli/exit_codes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exit codes for the InjectMark CLI.

InjectMark follows the BSD `sysexits` convention where a specific code exists, so
other tooling can interpret failures consistently. Click's own usage errors
(which default to 2) are remapped onto `ExitCode.USAGE_ERROR`.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Standardized exit codes for the InjectMark CLI.

    Attributes:
        SUCCESS: Every file was rewritten.
        FAILURE: Template resolution, data loading or at least one file failed.
        USAGE_ERROR: Command-line invocation error (missing arguments, bad
            flags). Mirrors BSD ``EX_USAGE (64)``.
        CONFIG_ERROR: Invalid configuration file. Mirrors BSD ``EX_CONFIG (78)``.

    Usage:
        ```python
        import subprocess
        from injectmark.cli.exit_codes import ExitCode

        result = subprocess.run(["injectmark", "head.html", "data.json", "index.html"])
        if result.returncode == ExitCode.SUCCESS:
            print("Fragments inserted.")
        ```
    """

    SUCCESS = 0
    FAILURE = 1

    # sysexits-aligned values
    USAGE_ERROR = 64  # EX_USAGE
    CONFIG_ERROR = 78  # EX_CONFIG
