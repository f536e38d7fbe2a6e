import sys

from wsnsim.cli import main

sys.exit(main())
