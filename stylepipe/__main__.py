import sys

from stylepipe.cli import main

sys.exit(main())
