# ==============================================================================
# Config Commands
# ==============================================================================
"""
Configuration display command for the trafficlens CLI.
"""

import json
from dataclasses import asdict
from typing import Annotated

import typer

from trafficlens.cli.shared import C
from trafficlens.utils.config import get_settings
from trafficlens.utils.network import NetworkProfile, get_request_config


# ==============================================================================
# Commands
# ==============================================================================


def config_show(
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output configuration as JSON")
    ] = False,
) -> None:
    """Display current configuration (includes secrets in JSON mode)."""
    settings = get_settings()

    # JSON output mode
    if json_output:
        config = {
            "analytics": settings.analytics.model_dump(),
            "classifier": settings.classifier.model_dump(),
            "postgresql": {
                "host": settings.postgres.host,
                "port": settings.postgres.port,
                "database": settings.postgres.database,
                "schema": settings.postgres.schema_name,
                "events_table": settings.postgres.events_table,
                "user": settings.postgres.user,
                "password": settings.postgres.password,
                "sslmode": settings.postgres.sslmode,
            },
            "valkey": {
                "host": settings.valkey.host,
                "port": settings.valkey.port,
                "db": settings.valkey.db,
                "ssl_enabled": settings.valkey.ssl,
                "password": settings.valkey.password,
                "key_prefix": settings.valkey.key_prefix,
            },
            "network_profiles": {
                profile.value: asdict(get_request_config(profile)) for profile in NetworkProfile
            },
            "log_level": settings.log_level,
        }
        print(json.dumps(config, indent=2))
        return

    # Human-readable output
    print()
    print(f"{C.BOLD}Configuration{C.RESET}")
    print()

    # Analytics
    analytics = settings.analytics
    print(f"{C.CYAN}Analytics{C.RESET}")
    print(f"  Session timeout:  {C.WHITE}{analytics.session_timeout_minutes} min{C.RESET}")
    print(f"  Default range:    {C.WHITE}{analytics.default_range}{C.RESET}")
    print(f"  Cache:            {C.WHITE}{analytics.cache_backend}{C.RESET}")
    print(f"  Cache TTL:        {C.WHITE}{analytics.cache_ttl_seconds}s{C.RESET}")
    print()

    # Classifier
    classifier = settings.classifier
    remote = classifier.base_url if classifier.remote_enabled else "disabled"
    print(f"{C.CYAN}Classifier{C.RESET}")
    print(f"  Remote service:   {C.WHITE}{remote}{C.RESET}")
    print(f"  Timeout:          {C.WHITE}{classifier.timeout_seconds:g}s{C.RESET}")
    print(f"  Cache TTL:        {C.WHITE}{classifier.cache_ttl_seconds}s{C.RESET}")
    print()

    # PostgreSQL
    print(f"{C.CYAN}PostgreSQL{C.RESET}")
    print(f"  Host:             {C.WHITE}{settings.postgres.host}{C.RESET}")
    print(f"  Port:             {C.WHITE}{settings.postgres.port}{C.RESET}")
    print(f"  Database:         {C.WHITE}{settings.postgres.database}{C.RESET}")
    print(
        f"  Table:            {C.WHITE}{settings.postgres.schema_name}."
        f"{settings.postgres.events_table}{C.RESET}"
    )
    print(f"  User:             {C.WHITE}{settings.postgres.user}{C.RESET}")
    print(f"  SSL:              {C.WHITE}{settings.postgres.sslmode}{C.RESET}")
    print()

    # Valkey
    print(f"{C.CYAN}Valkey{C.RESET}")
    print(f"  Host:             {C.WHITE}{settings.valkey.host}:{settings.valkey.port}{C.RESET}")
    valkey_ssl = "enabled" if settings.valkey.ssl else "disabled"
    print(f"  SSL:              {C.WHITE}{valkey_ssl}{C.RESET}")
    print(f"  Key prefix:       {C.WHITE}{settings.valkey.key_prefix}{C.RESET}")
    print()
