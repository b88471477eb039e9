import sys

from calculator.main import main

sys.exit(main())
