import shlex
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Annotated

import numpy as np
from cyclopts import App, Parameter
from numpy.typing import NDArray
from rich.console import Console
from rich.table import Table

from riffwave.cli.validators import validate_gain_factor, validate_non_negative_integer
from riffwave.dsp import effects
from riffwave.format import RiffError, WaveFile, validate_format
from riffwave.io import load_samples, save_samples
from riffwave.log import configure_logging
from riffwave.types import EchoSettings, Effect, GainSettings

app = App(
    name="riffwave",
    help="Apply simple effects to WAV files",
    result_action="return_value",
)
console = Console()

SHELL_USAGE = """\
Usage: <mode> <input WAV(s)> <output WAV>
Where mode can be one of the following:
	 f : Faster.
	 s : Slower.
	 e : Echo.
	 r : Reverse.
	 + : Plus volume.
	 - : Minus volume.
	 m : Mix two .WAV files together. Takes an extra filename argument.
	 q : Quit."""


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(message, style="bold red")


def print_success(message: str) -> None:
    """Print a success message in green."""
    console.print(message, style="bold green")


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(message, style="bold yellow")


def _run_effect(
    transform: Callable[[NDArray[np.float64]], NDArray[np.float64]],
    source: Path,
    output: Path,
) -> int:
    try:
        samples = load_samples(source)
        result = transform(samples)
        save_samples(output, result)
    except RiffError as e:
        print_error(f"Error: {e}")
        return 1

    print_success(f"Wrote {len(result)} samples to {output}")
    return 0


@app.command
def faster(source: Path, output: Path) -> int:
    """
    Double the playback speed by dropping every other sample.

    Parameters
    ----------
    source: Path
        Input WAV file
    output: Path
        Output WAV file (mono)
    """
    console.print("Faster!")
    return _run_effect(effects.faster, source, output)


@app.command
def slower(source: Path, output: Path) -> int:
    """
    Halve the playback speed by repeating every sample.

    Parameters
    ----------
    source: Path
        Input WAV file
    output: Path
        Output WAV file (mono)
    """
    console.print("Slower!")
    return _run_effect(effects.slower, source, output)


@app.command
def echo(
    source: Path,
    output: Path,
    delay: Annotated[int, Parameter(validator=validate_non_negative_integer)] = EchoSettings.delay,
    intensity: float = EchoSettings.intensity,
) -> int:
    """
    Add a delayed copy of the signal on top of itself.

    Parameters
    ----------
    source: Path
        Input WAV file
    output: Path
        Output WAV file (mono)
    delay: int
        Echo delay in samples
    intensity: float
        Gain of the delayed copy
    """
    console.print("Echo!")
    return _run_effect(
        lambda samples: effects.echo(samples, delay=delay, intensity=intensity),
        source,
        output,
    )


@app.command
def reverse(source: Path, output: Path) -> int:
    """
    Play the file backwards.

    Parameters
    ----------
    source: Path
        Input WAV file
    output: Path
        Output WAV file (mono)
    """
    console.print("Reverse!")
    return _run_effect(effects.reverse, source, output)


@app.command
def louder(
    source: Path,
    output: Path,
    factor: Annotated[float, Parameter(validator=validate_gain_factor)] = GainSettings.louder,
) -> int:
    """
    Increase the volume.

    Parameters
    ----------
    source: Path
        Input WAV file
    output: Path
        Output WAV file (mono)
    factor: float
        Amplitude multiplier
    """
    console.print("Increase volume!")
    return _run_effect(lambda samples: effects.louder(samples, factor), source, output)


@app.command
def quieter(
    source: Path,
    output: Path,
    factor: Annotated[float, Parameter(validator=validate_gain_factor)] = GainSettings.quieter,
) -> int:
    """
    Decrease the volume.

    Parameters
    ----------
    source: Path
        Input WAV file
    output: Path
        Output WAV file (mono)
    factor: float
        Amplitude multiplier
    """
    console.print("Decrease volume!")
    return _run_effect(lambda samples: effects.quieter(samples, factor), source, output)


@app.command
def mix(first: Path, second: Path, output: Path) -> int:
    """
    Mix two WAV files; the shorter one is looped to the longer one's length.

    Parameters
    ----------
    first: Path
        First input WAV file
    second: Path
        Second input WAV file
    output: Path
        Output WAV file (mono)
    """
    console.print("Mix!")
    try:
        other = load_samples(second)
    except RiffError as e:
        print_error(f"Error: {e}")
        return 1
    return _run_effect(lambda samples: effects.mix(samples, other), first, output)


@app.command
def info(file: Path) -> int:
    """
    Show the header fields of a WAV file.

    Parameters
    ----------
    file: Path
        WAV file to inspect
    """
    wave = WaveFile()
    try:
        report = wave.load_metadata(file)
    except RiffError as e:
        print_error(f"Error: {e}")
        return 1

    fields = wave.info()
    table = Table(title=f"WAV file info: {file}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("File size", str(fields["file_size"]))
    table.add_row("Compression", str(fields["compression"]))
    table.add_row("Channels", str(fields["channels"]))
    table.add_row("Sample rate", str(fields["sample_rate"]))
    table.add_row("Bytes per second", str(fields["bytes_per_sec"]))
    table.add_row("Block align", str(fields["block_align"]))
    table.add_row("Bits per sample", str(fields["bits_per_sample"]))
    table.add_row("Data size", str(fields["data_size"]))
    table.add_row("Samples", str(fields["sample_count"]))
    if fields["other_chunks"]:
        table.add_row("Other chunks", ", ".join(repr(tag) for tag in fields["other_chunks"]))
    console.print(table)

    result = validate_format(wave.fmt_chunk)
    for message in report.warnings:
        print_warning(f"Warning: {message}")
    for message in result.warnings:
        print_warning(f"Warning: {message}")
    for message in result.errors:
        print_error(f"Error: {message}")

    return 0 if result.valid else 1


_SHELL_MODES: dict[str, tuple[Effect, int]] = {
    "f": (Effect.faster, 2),
    "s": (Effect.slower, 2),
    "e": (Effect.echo, 2),
    "r": (Effect.reverse, 2),
    "+": (Effect.louder, 2),
    "-": (Effect.quieter, 2),
    "m": (Effect.mix, 3),
}

_SHELL_COMMANDS: dict[Effect, Callable[..., int]] = {
    Effect.faster: faster,
    Effect.slower: slower,
    Effect.echo: echo,
    Effect.reverse: reverse,
    Effect.louder: louder,
    Effect.quieter: quieter,
    Effect.mix: mix,
}


@app.command
def shell() -> int:
    """
    Interactive mode: read '<mode> <input WAV(s)> <output WAV>' lines until 'q'.
    """
    console.print("This here is an interactive program for manipulating MS Wave files.")
    console.print(SHELL_USAGE, highlight=False)
    console.print("")

    while True:
        try:
            line = console.input("> ")
        except EOFError:
            console.print("Exiting.")
            return 0

        try:
            words = shlex.split(line)
        except ValueError as e:
            print_error(f"Can't parse {line!r}: {e}")
            continue
        if not words:
            continue

        mode, paths = words[0], words[1:]
        if mode == "q":
            console.print("Exiting.")
            return 0

        if mode not in _SHELL_MODES:
            print_error(f"Unknown mode: {mode}")
            console.print("Use 'q' to quit.")
            continue

        effect, num_paths = _SHELL_MODES[mode]
        if len(paths) != num_paths:
            print_error(f"Mode {mode} takes {num_paths} filenames, got {len(paths)}")
            continue

        _SHELL_COMMANDS[effect](*(Path(p) for p in paths))
        console.print("")


@app.meta.default
def launcher(
    *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    verbose: bool = False,
) -> int:
    """
    Parameters
    ----------
    verbose: bool
        Log debug output from the WAV codec
    """
    configure_logging(verbose)
    return app(tokens)


def main() -> None:
    sys.exit(app.meta())


if __name__ == "__main__":
    main()
