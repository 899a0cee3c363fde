import sys

from rooinit.cli import main

sys.exit(main())
