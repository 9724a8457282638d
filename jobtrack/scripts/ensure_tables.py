"""
Create any missing tables (open_jobs, applications, ...) without touching data.
Usage: python -m jobtrack.scripts.ensure_tables
"""
from jobtrack.database import ensure_tables_exist
from jobtrack.logging_config import setup_logging


def main():
    setup_logging()
    ensure_tables_exist()
    print("DB table check complete: created only missing tables.")


if __name__ == "__main__":
    main()
