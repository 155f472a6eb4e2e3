"""main.py: Entry point script for running snapdir from a checkout.

    Same as the installed `snapdir` console script:
    python main.py clone <source_dir> <output.json> [flags]
    python main.py restore <snapshot.json> <destination_dir> [flags]"""
# main.py
import sys
from pathlib import Path

# Ensure the 'snapdir' package directory is findable if running main.py directly
script_dir = Path(__file__).parent
if str(script_dir) not in sys.path:
    sys.path.insert(0, str(script_dir))  # Add project root to path

from snapdir.cli import main

if __name__ == "__main__":
    sys.exit(main())
