import sys

from instajson.cli import main

sys.exit(main())
