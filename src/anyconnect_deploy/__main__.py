"""Allow ``python -m anyconnect_deploy``."""

from anyconnect_deploy.cli.main import main

main()
