#!/usr/bin/env python
"""
PATH: manage.py

Runs against backend.settings.dev unless DJANGO_SETTINGS_MODULE names a
concrete module. Pointing it at the bare "backend.settings" package would
load no apps, so that value is treated as unset.
"""

from __future__ import annotations

import os
import sys

DEFAULT_SETTINGS = "backend.settings.dev"


def main() -> None:
    configured = (os.environ.get("DJANGO_SETTINGS_MODULE") or "").strip()
    if configured in ("", "backend.settings"):
        os.environ["DJANGO_SETTINGS_MODULE"] = DEFAULT_SETTINGS

    from django.core.management import execute_from_command_line

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
