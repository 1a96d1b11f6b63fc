#!/usr/bin/env python3
"""Validate Redmine CLI configuration and test connectivity."""

import sys

from redmine_cli.redmine.client import RedmineClient
from redmine_cli.redmine.errors import RedmineError
from redmine_cli.settings import load_settings


def main() -> int:
    print("Loading settings...")
    try:
        settings = load_settings()
    except RedmineError as e:
        print(f"FAIL: Could not load settings: {e}")
        return 1

    print(f"  REDMINE_URL: {settings.url}")
    print(f"  REDMINE_API_KEY: {'*' * 8}...{settings.api_key[-4:]}")

    print("\nTesting connectivity...")
    try:
        with RedmineClient(settings.url, settings.api_key, timeout=settings.timeout) as client:
            user = client.get_current_user()
            print(f"  OK: Authenticated as {user.name} (id {user.id})")
            projects = client.list_projects().projects
    except RedmineError as e:
        print(f"  FAIL: {e}")
        return 1

    print(f"  OK: Found {len(projects)} accessible projects")
    for p in projects[:5]:
        print(f"    - {p.identifier}: {p.name}")
    if len(projects) > 5:
        print(f"    ... and {len(projects) - 5} more")
    return 0


if __name__ == "__main__":
    sys.exit(main())
