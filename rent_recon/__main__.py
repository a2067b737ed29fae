import sys

from rent_recon.cli import main

sys.exit(main())
