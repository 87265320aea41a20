import sys

from weatherdeck.cli import main

sys.exit(main())
