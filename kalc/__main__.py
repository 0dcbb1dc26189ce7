import sys

from kalc.main import main

sys.exit(main())
