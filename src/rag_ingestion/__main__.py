"""Allow ``python -m rag_ingestion``."""

import sys

from rag_ingestion.cli import main

sys.exit(main())
