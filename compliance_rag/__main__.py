"""Allow running as: python -m compliance_rag"""

import sys

from compliance_rag.main import main

if __name__ == "__main__":
    sys.exit(main())
