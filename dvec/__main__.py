import sys

from dvec.cli import cli_main

sys.exit(cli_main())
