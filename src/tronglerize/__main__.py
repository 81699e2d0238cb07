import sys

from tronglerize.main import main


sys.exit(main())
