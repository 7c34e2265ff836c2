import sys

from termbrot.cli import main

sys.exit(main())
