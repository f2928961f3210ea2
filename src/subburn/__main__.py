import sys

from subburn.presentation.cli import main

sys.exit(main())
