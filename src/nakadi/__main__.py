import sys

from nakadi.cli import main

sys.exit(main())
