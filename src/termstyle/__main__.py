import sys

from termstyle.cli import main

sys.exit(main())
