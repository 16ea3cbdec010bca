import sys

from sitemap.cli import main

sys.exit(main())
