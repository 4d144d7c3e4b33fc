#!/usr/bin/env python3
"""
Project Bid Assistant - Command-Line Chat

Asks the assistant one question about a project and prints the reply and any
proposed changes:
1. Load configuration
2. Connect to the database (optionally seeding the sample project)
3. Aggregate bid data and assemble the briefcase
4. Get Claude's reply
5. Show proposed changes

Usage:
    python run_chat.py --project-id <uuid> "Who has the lowest electrical bid?"
    python run_chat.py --seed-sample "Which package is cheapest?"
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from bid_assistant.chat import ChatRequest, build_service
from bid_assistant.config import load_settings
from bid_assistant.errors import ProjectChatError
from bid_assistant.librarian.db_client import DatabaseClient

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

SAMPLE_DATA = Path(__file__).parent / 'data' / 'sample_project.json'


def print_separator(title: str = "") -> None:
    """Print a formatted separator line."""
    if title:
        print(f"\n{'='*70}")
        print(f"  {title}")
        print(f"{'='*70}\n")
    else:
        print(f"{'='*70}")


def show(value) -> str:
    if value is None:
        return "(none)"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ask the project bid assistant a question")
    parser.add_argument("message", help="Question or change request")
    parser.add_argument("--project-id", help="Project identifier")
    parser.add_argument("--seed-sample", action="store_true",
                        help="Create tables and load data/sample_project.json first")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Ask one question and print the answer."""
    args = parse_args(argv)
    print_separator("PROJECT BID ASSISTANT")

    try:
        print("Step 1: Loading configuration...")
        settings = load_settings()

        print("\nStep 2: Connecting to the database...")
        with DatabaseClient(settings.database_url, echo=settings.db_echo) as db_client:
            if not db_client.health_check():
                print("❌ Database is not reachable")
                return 1

            project_id = args.project_id
            if args.seed_sample:
                try:
                    db_client.initialize_schema()
                    project_id = db_client.load_data_from_json(str(SAMPLE_DATA))
                except RuntimeError as e:
                    print(f"❌ Could not load the sample project: {e}")
                    return 1
                print(f"✓ Sample project loaded: {project_id}")

            if not project_id:
                print("❌ Provide --project-id or --seed-sample")
                return 1

            service = build_service(settings, db_client=db_client)
            if not service.claude.validate_api_key():
                print("❌ Claude API key was rejected")
                return 1

            print_separator("Step 3: Asking Claude")
            print(f"Q: {args.message}\n")
            result = service.handle(ChatRequest(project_id=project_id, message=args.message))

        print(result.response)

        if result.has_changes:
            print_separator("Proposed Changes")
            for i, change in enumerate(result.proposed_changes, start=1):
                print(f"{i}. [{change.type_tag}] {change.description}")
                print(f"   Target:  {show(change.target)}")
                print(f"   Current: {show(change.current_value)}")
                print(f"   New:     {show(change.new_value)}")
            print("\nChanges are not applied; review and approve them in the app.")

        return 0

    except ProjectChatError as e:
        logger.error(f"Chat failed: {e.message}")
        print(f"\n❌ Error ({e.status_code}): {e.message}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
