"""
Complete finished play sessions.

Marks every open or full session whose end time has passed as
completed.  Meant to run periodically (cron, scheduler).

Usage:
    python scripts/complete_sessions.py
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

load_dotenv()

from sqlmodel import Session

from app.core.exceptions import SchedulingError
from app.db.session import engine
from app.services.session_service import SessionService

if __name__ == "__main__":
    print("=" * 50)
    print("Completing finished play sessions")
    print("=" * 50)

    try:
        with Session(engine) as session:
            completed = SessionService(session).complete_finished_sessions()
    except SchedulingError as e:
        print(f"ERROR: {e.detail}")
        sys.exit(1)

    for session_id in completed:
        print(f"  ✓ {session_id}")
    print(f"Completed {len(completed)} session(s)")
    sys.exit(0)
