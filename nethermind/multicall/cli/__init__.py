import logging

import click
from dotenv import load_dotenv

from nethermind.multicall.cli.utils import (
    api_key_option,
    group_options,
    json_option,
    network_option,
    verbose_option,
)

# isort: skip_file
# pylint: disable=too-many-arguments,import-outside-toplevel

root_logger = logging.getLogger("nethermind")


@click.group()
@click.version_option(package_name="nethermind-multicall")
def multicall_cli():
    """Decode multicall transaction data using the Etherscan API and the 4byte directory"""
    load_dotenv()


@multicall_cli.command()
@click.argument("data")
@group_options(api_key_option, network_option, verbose_option, json_option)
def decode(data: str, api_key: str | None, network: str, verbose: bool, json_output: bool):
    """Decode multicall transaction data"""
    from rich.console import Console

    from nethermind.multicall.cli.formatting import print_decoded_calls
    from nethermind.multicall.cli.utils import cli_logger_config
    from nethermind.multicall.decoding.dispatcher import MulticallDecoder
    from nethermind.multicall.exceptions import DecodingError
    from nethermind.multicall.types.networks import SupportedNetwork
    from nethermind.multicall.types.utils import decoded_calls_to_json

    error_console = cli_logger_config(root_logger, verbose)
    decoder_network = SupportedNetwork(network)
    decoder = MulticallDecoder(etherscan_api_key=api_key, network=decoder_network)

    if verbose:
        error_console.print(f"[blue]Decoding multicall data on {decoder_network.pretty()}...\n")

    try:
        decoded_calls = decoder.decode_envelope(data)
    except DecodingError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1) from e

    if json_output:
        click.echo(decoded_calls_to_json(decoded_calls))
        return

    metadata = decoder.contract_metadata([call.target for call in decoded_calls])
    print_decoded_calls(Console(), decoded_calls, metadata)


@multicall_cli.command("decode-call")
@click.argument("target")
@click.argument("data")
@group_options(api_key_option, network_option, verbose_option, json_option)
def decode_call(target: str, data: str, api_key: str | None, network: str, verbose: bool, json_output: bool):
    """Decode a single contract call"""
    from rich.console import Console

    from nethermind.multicall.cli.formatting import print_decoded_calls
    from nethermind.multicall.cli.utils import cli_logger_config
    from nethermind.multicall.decoding.dispatcher import MulticallDecoder
    from nethermind.multicall.exceptions import DecodingError
    from nethermind.multicall.types.networks import SupportedNetwork
    from nethermind.multicall.types.utils import decoded_calls_to_json

    error_console = cli_logger_config(root_logger, verbose)
    decoder_network = SupportedNetwork(network)
    decoder = MulticallDecoder(etherscan_api_key=api_key, network=decoder_network)

    if verbose:
        error_console.print(f"[blue]Decoding call to {target} on {decoder_network.pretty()}...\n")

    try:
        decoded_call = decoder.decode_one(target, data)
    except DecodingError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1) from e

    if json_output:
        click.echo(decoded_calls_to_json(decoded_call))
        return

    metadata = decoder.contract_metadata([decoded_call.target])
    print_decoded_calls(Console(), [decoded_call], metadata)
