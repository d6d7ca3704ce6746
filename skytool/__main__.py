import sys

from .sky import main

sys.exit(main())
