"""
Fallback handler registry for dependency installation.

Each handler pairs a failure matcher with a recovery action:

    pattern     regex searched (case-insensitive) in pip's stderr
    exit_code   optional; when set it must equal pip's exit code
    extra_args  arguments appended to the pip command for the retry
    notice      warning printed to the operator before the retry

Handlers are evaluated in list order. Each handler is applied at
most once per install, so a handler whose retry fails again is not
retried a second time.
"""

from __future__ import annotations

PIP_FALLBACK_HANDLERS: list[dict] = [
    {
        "failure_id": "pep668",
        "label": "Externally managed Python (PEP 668)",
        "pattern": r"externally.managed",
        "extra_args": ["--break-system-packages"],
        "notice": (
            "System pip is externally managed (PEP 668). "
            "Retrying with --break-system-packages..."
        ),
        "example_stderr": (
            "error: externally-managed-environment\n"
            "× This environment is externally managed\n"
            "╰─> To install Python packages system-wide, try apt install\n"
            "    python3-xyz, where xyz is the package you are trying to install."
        ),
    },
]
