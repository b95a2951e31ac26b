import sys

from gazecheck.cli import main

sys.exit(main())
