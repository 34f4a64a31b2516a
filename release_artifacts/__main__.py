import sys

from release_artifacts.runner import main

sys.exit(main())
