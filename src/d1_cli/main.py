"""
DataONE CLI Main Entry Point

Command-line interface for browsing the Coordinating Node registry.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

import click

from d1_client import __version__
from d1_client.client import AsyncCNClient
from d1_client.exceptions import D1Error
from d1_client.models import D1Node
from d1_client.xml_parser import XMLParser
from d1_cli.config import CLIConfig, ServiceConfig, create_sample_config
from d1_cli.output import OutputFormatter, print_error, print_info, print_success


# Global state for the CLI session
class CLIState:
    config: Optional[CLIConfig] = None
    formatter: Optional[OutputFormatter] = None


state = CLIState()


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option("--config", "-c", type=click.Path(exists=True), help="Config file path")
@click.option("--profile", "-p", default="default", help="Config profile to use")
@click.option("--env", "-e", "environment", help="CN environment (PROD, STAGING, ...)")
@click.option("--api-version", type=int, help="DataONE API version")
@click.option("--base-url", help="Versioned CN service URL (overrides --env)")
@click.option("--timeout", type=float, help="Request timeout in seconds")
@click.option("--format", "-f", type=click.Choice(["table", "json"]), default="table", help="Output format")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, config, profile, environment, api_version, base_url, timeout, format, quiet, debug):
    """
    DataONE CLI - Coordinating Node registry

    \b
    Configuration:
      Use a config file at ~/.d1/config.yaml or specify options on command line.
      Run 'd1 config init' to create a sample config file.

    \b
    Examples:
      d1 nodes list
      d1 --env STAGING nodes list --type mn --state up
      d1 -f json nodes show urn:node:KNB
    """
    # Setup logging
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    state.formatter = OutputFormatter(format=format, quiet=quiet)

    # Load config
    if config:
        loaded_config = CLIConfig.from_file(Path(config), profile)
    else:
        loaded_config = CLIConfig.find_and_load(profile)
    if loaded_config is None:
        loaded_config = CLIConfig(profile=profile)

    # CLI options override config file
    service = loaded_config.service
    if environment:
        # An explicit environment replaces a configured base URL
        service = ServiceConfig(environment=environment, version=service.version, timeout=service.timeout)
    loaded_config.service = ServiceConfig(
        environment=service.environment,
        version=api_version if api_version is not None else service.version,
        timeout=timeout if timeout is not None else service.timeout,
        base_url=base_url or service.base_url,
    )
    state.config = loaded_config


def get_client() -> AsyncCNClient:
    """
    Create a CN client from the current configuration.

    Returns:
        AsyncCNClient instance
    """
    service = state.config.service
    return AsyncCNClient(
        cn=service.environment,
        version=service.version,
        timeout=service.timeout,
        base_url=service.base_url,
        environments=state.config.environments,
    )


async def _fetch_nodes() -> List[D1Node]:
    async with get_client() as client:
        return await client.list_nodes()


def fetch_nodes() -> List[D1Node]:
    """Fetch the node list, exiting with an error message on failure."""
    try:
        return asyncio.run(_fetch_nodes())
    except D1Error as e:
        print_error(f"Failed to list nodes: {e}")
        sys.exit(1)


def filter_nodes(nodes: List[D1Node], node_type: str = None, node_state: str = None) -> List[D1Node]:
    """Keep nodes matching the given type and state."""
    if node_type:
        nodes = [n for n in nodes if n.type is not None and n.type.value == node_type]
    if node_state:
        nodes = [n for n in nodes if n.state is not None and n.state.value == node_state]
    return nodes


# =============================================================================
# Config Commands
# =============================================================================

@cli.group()
def config():
    """Configuration management commands."""
    pass


@config.command("init")
@click.option("--path", "-p", type=click.Path(), default="~/.d1/config.yaml", help="Config file path")
def config_init(path):
    """Create sample configuration file."""
    path = Path(path).expanduser()

    path.parent.mkdir(parents=True, exist_ok=True)

    if path.exists():
        if not click.confirm(f"{path} already exists. Overwrite?"):
            return

    path.write_text(create_sample_config())

    print_success(f"Created config file: {path}")
    print_info("Edit the file to choose your Coordinating Node environment.")


@config.command("show")
def config_show():
    """Show current configuration."""
    service = state.config.service
    info = {
        "Profile": state.config.profile,
        "Environment": service.environment,
        "API Version": service.version,
        "Base URL": service.base_url or "(from environment)",
        "Timeout": service.timeout,
    }
    state.formatter.output(info)


@cli.command()
def envs():
    """List known CN environments."""
    state.formatter.output(dict(sorted(state.config.environments.items())), title_keys=False)


# =============================================================================
# Node Commands
# =============================================================================

@cli.group()
def nodes():
    """Node registry commands."""
    pass


@nodes.command("list")
@click.option("--type", "-t", "node_type", type=click.Choice(["cn", "mn"]), help="Only show nodes of this type")
@click.option("--state", "-s", "node_state", type=click.Choice(["up", "down", "unknown"]), help="Only show nodes in this state")
def nodes_list(node_type, node_state):
    """List nodes registered with the Coordinating Node."""
    result = filter_nodes(fetch_nodes(), node_type, node_state)
    state.formatter.output(result)
    state.formatter.info(f"{len(result)} nodes")


@nodes.command("show")
@click.argument("identifier")
def nodes_show(identifier):
    """
    Show details of one node.

    IDENTIFIER: Node identifier, e.g. urn:node:KNB
    """
    for node in fetch_nodes():
        if node.identifier == identifier:
            state.formatter.output(node)
            return

    print_error(f"Node not found: {identifier}")
    sys.exit(1)


@nodes.command("parse")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--type", "-t", "node_type", type=click.Choice(["cn", "mn"]), help="Only show nodes of this type")
@click.option("--state", "-s", "node_state", type=click.Choice(["up", "down", "unknown"]), help="Only show nodes in this state")
def nodes_parse(file, node_type, node_state):
    """
    Decode a saved node list document.

    FILE: Node list XML, e.g. saved from <cn>/v2/node
    """
    try:
        result = XMLParser.parse_node_list(Path(file).read_bytes())
    except D1Error as e:
        print_error(f"Failed to parse {file}: {e}")
        sys.exit(1)

    result = filter_nodes(result, node_type, node_state)
    state.formatter.output(result)
    state.formatter.info(f"{len(result)} nodes")


# =============================================================================
# Entry Point
# =============================================================================

def main():
    """Main entry point."""
    try:
        cli()
    except D1Error as e:
        print_error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nAborted.")
        sys.exit(130)


if __name__ == "__main__":
    main()
