"""
Run the QuoteWatch analyzer.
"""
import os
import sys

# Set path so the package imports without installation
root_dir = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, root_dir)

# Load environment
from dotenv import load_dotenv
load_dotenv(os.path.join(root_dir, ".env"))

from quotewatch.main import main

if __name__ == "__main__":
    sys.exit(main())
