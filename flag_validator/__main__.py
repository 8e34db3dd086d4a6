import sys

from .validator import main

sys.exit(main())
