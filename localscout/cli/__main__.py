"""Allow ``python -m localscout.cli`` execution."""

from localscout.cli.chat import main

main()
