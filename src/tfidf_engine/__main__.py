import sys

from tfidf_engine.cli import main


sys.exit(main())
