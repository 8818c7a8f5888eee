import sys

from spam_pipeline.cli import main

sys.exit(main())
