#!/usr/bin/env python3
"""
Database initialization script for the Assessment Report Export service
Run this script to create the export history and template tables
"""

import sys

from app import create_app
from database import init_db, reset_database


def main():
    """Main function to initialize database"""
    app = create_app()

    if len(sys.argv) > 1 and sys.argv[1] == '--reset':
        print("WARNING: This will delete all export history and templates!")
        confirm = input("Are you sure you want to reset the database? (yes/no): ")
        if confirm.lower() == 'yes':
            reset_database(app)
        else:
            print("Database reset cancelled.")
    else:
        init_db(app)


if __name__ == '__main__':
    main()
