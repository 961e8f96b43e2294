import sys

from elfbooks.app.main import main

sys.exit(main())
