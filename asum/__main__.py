import sys

from asum.cli.main import main

sys.exit(main())
