import sys

from pyprovision.cli import main

sys.exit(main())
