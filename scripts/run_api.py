"""Start the API from a source checkout, in development mode by default."""
import os
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))
os.environ.setdefault("PYTHONPATH", str(src_path))
os.environ.setdefault("ENVIRONMENT", "development")

from flixdog_pricing.api.main import run

if __name__ == "__main__":
    try:
        run()
    except KeyboardInterrupt:
        print("\nAPI stopped.")
