"""Allow running as ``python -m mapconverter``."""

import sys

from mapconverter.app import main

sys.exit(main())
