"""Allow `python -m framewalk`."""

import sys

from framewalk.cli import main


sys.exit(main())
