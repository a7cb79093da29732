import sys

from solana_lib.cli import main

sys.exit(main())
