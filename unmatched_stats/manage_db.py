#!/usr/bin/env python3
"""Database management and server CLI"""

import asyncio
import argparse
import json
import sys

from unmatched_stats.config import Settings, get_settings
from unmatched_stats.database.connection import CosmosDBConnection


async def init_command(settings: Settings) -> None:
    """Create the database and containers if they do not exist"""
    print("Initializing database...")
    cosmos_db = CosmosDBConnection(settings)
    try:
        await cosmos_db.connect()
        print(json.dumps(await cosmos_db.health_check(), indent=2))
    finally:
        await cosmos_db.disconnect()


async def health_command(settings: Settings) -> None:
    """Check database health"""
    print("Checking database health...")
    cosmos_db = CosmosDBConnection(settings)
    try:
        await cosmos_db.connect()
        health_result = await cosmos_db.health_check()
    except Exception as e:
        print(f"Health check failed: {e}")
        sys.exit(1)
    finally:
        await cosmos_db.disconnect()

    print(json.dumps(health_result, indent=2))
    if health_result["status"] != "healthy":
        sys.exit(1)


def status_command(settings: Settings) -> None:
    """Show the effective configuration (secrets omitted)"""
    print("Configuration:")
    print("=" * 50)
    print(f"Environment: {settings.app_env}")
    print(f"Database: {settings.cosmos_database_name}")
    print("Containers:")
    print(f"  - Users: {settings.cosmos_container_users}")
    print(f"  - Players: {settings.cosmos_container_players}")
    print(f"  - Games: {settings.cosmos_container_games}")
    print(f"Listen: {settings.api_host}:{settings.port}")
    print(f"Require auth: {settings.require_auth}")
    print(f"Validate game references: {settings.validate_game_references}")


def serve_command(settings: Settings) -> None:
    import uvicorn
    from unmatched_stats.main import create_app

    uvicorn.run(create_app(settings), host=settings.api_host, port=settings.port)


def main(argv=None):
    """Main CLI function"""
    parser = argparse.ArgumentParser(description="Unmatched Stats management CLI")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init", help="Initialize database and containers")
    subparsers.add_parser("health", help="Check database health")
    subparsers.add_parser("status", help="Show configuration")
    subparsers.add_parser("serve", help="Run the API server")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    settings = get_settings()

    if args.command == "init":
        asyncio.run(init_command(settings))
    elif args.command == "health":
        asyncio.run(health_command(settings))
    elif args.command == "status":
        status_command(settings)
    elif args.command == "serve":
        serve_command(settings)


if __name__ == "__main__":
    main()
