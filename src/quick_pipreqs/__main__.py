import sys

from quick_pipreqs.cli.main import main

sys.exit(main())
