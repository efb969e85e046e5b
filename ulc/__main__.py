import sys

from ulc.main import main

sys.exit(main())
