#!/usr/bin/env python3
"""Drop and recreate the base_websites table. Saved app settings are kept."""
import sys
from pathlib import Path

# Ensure backend app is on path when run from project root or backend/
backend = Path(__file__).resolve().parent.parent
if str(backend) not in sys.path:
    sys.path.insert(0, str(backend))

from app.database import init_db, reset_websites_table

if __name__ == "__main__":
    init_db()
    reset_websites_table()
    print("base_websites recreated. All websites have been removed.")
