"""Entry point for running the CLI: python -m redmine_cli"""

from redmine_cli.cli.app import main

if __name__ == "__main__":
    main()
