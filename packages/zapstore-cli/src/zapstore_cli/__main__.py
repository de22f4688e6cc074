import sys

from zapstore_cli.main import main

sys.exit(main())
