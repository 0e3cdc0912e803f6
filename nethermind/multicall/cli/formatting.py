import json
from typing import Any

from rich.console import Console
from rich.markup import escape

from nethermind.multicall.types.decoding import ContractMetadata, DecodedCall, ResolutionConfidence
from nethermind.multicall.types.utils import HexEnabledJsonEncoder


def truncate_string(value: str, max_length: int) -> str:
    """
    Truncates the middle of a string, keeping the start and end

    >>> truncate_string("0x" + "ab" * 30, 20)
    '0xababab...abababab'
    """
    if len(value) <= max_length:
        return value
    half = (max_length - 3) // 2
    return f"{value[:half]}...{value[-half:]}"


def format_argument(arg: Any) -> str:
    """Formats a decoded argument for console output"""
    match arg:
        case bool():
            return str(arg)
        case int():
            return f"{arg} [dim](0x{arg:x})[/dim]" if arg >= 0 else str(arg)
        case bytes() | bytearray():
            return truncate_string("0x" + arg.hex(), 50)
        case str():
            return escape(truncate_string(arg, 50) if arg.startswith("0x") else arg)
        case list() | tuple():
            if len(arg) == 0:
                return "\\[]"
            if len(arg) > 3:
                return f"\\[{', '.join(format_argument(a) for a in arg[:3])}, ... {len(arg) - 3} more]"
            return f"\\[{', '.join(format_argument(a) for a in arg)}]"
        case dict():
            return escape(json.dumps(arg, cls=HexEnabledJsonEncoder))
        case _:
            return escape(str(arg))


def _contract_label(metadata: ContractMetadata | None) -> list[str]:
    if metadata is None or not metadata.verified:
        return []

    if metadata.is_proxy:
        lines = [f"[yellow]Contract:[/yellow] [green]{escape(metadata.display_name)} (Proxy)"]
        if metadata.implementation_display_name:
            lines.append(f"[yellow]Implementation:[/yellow] [green]{escape(metadata.implementation_display_name)}")
        return lines

    return [f"[yellow]Contract:[/yellow] [green]{escape(metadata.display_name)}"]


def print_decoded_calls(
    console: Console,
    decoded_calls: list[DecodedCall],
    contract_metadata: dict[str, ContractMetadata] | None = None,
):
    """
    Prints decoded calls to the console, along with contract names when metadata is available

    :param console: rich Console
    :param decoded_calls: calls to print
    :param contract_metadata: mapping from lowercase address to ContractMetadata
    """
    console.print(f"\n[bold green]Decoded {len(decoded_calls)} call(s):\n")

    for index, call in enumerate(decoded_calls):
        console.print(f"[bold cyan]Call {index + 1}:")
        console.print("[dim]" + "─" * 60)
        console.print(f"[yellow]Target:[/yellow] {call.target}")

        for line in _contract_label((contract_metadata or {}).get(call.target.lower())):
            console.print(line)

        signature_line = f"[yellow]Function:[/yellow] {escape(call.function_signature)}"
        if call.confidence == ResolutionConfidence.guessed:
            signature_line += " [red](unverified guess)"
        console.print(signature_line)

        if call.args:
            console.print("[yellow]Arguments:")
            for arg_index, arg in enumerate(call.args):
                console.print(f"  [dim]\\[{arg_index}][/dim] {format_argument(arg)}")
        else:
            console.print("[yellow]Arguments:[/yellow] [dim]none")

        console.print(f"[yellow]Raw Data:[/yellow] [dim]{truncate_string('0x' + call.raw_call_data.hex(), 100)}")
        console.print()
