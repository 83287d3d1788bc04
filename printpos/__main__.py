import sys

from printpos.cli import main

sys.exit(main())
