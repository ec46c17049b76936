"""rbmin CLI — render a resolved Ruby syntax tree as compact source."""

from __future__ import annotations

import os
import sys

from .render import (
    SEP_NEWLINE,
    SEP_SEMICOLON,
    STYLE_OBFUSCATED,
    STYLE_VERBOSE,
    RenderConfig,
    UnsupportedConstruct,
    render_program,
)
from .serialize import TreeError, loads

USAGE: str = """\
rbmin [OPTIONS] [INPUT] [-o OUTPUT]

Render a syntax tree document (JSON) as minified Ruby. With INPUT the result
is written beside it as NAME.min.rb; without INPUT the tree is read from stdin
and the result printed.

Options:
  --compact           Semicolon separators and obfuscated literals
  --separator SEP     Statement separator: newline, semicolon
  --style STYLE       Literal style: verbose, obfuscated
  -o, --output FILE   Write output to FILE (- for stdout)
  --help              Show this help message
"""

SEPARATOR_NAMES: dict[str, str] = {
    "newline": SEP_NEWLINE,
    "semicolon": SEP_SEMICOLON,
}

STYLE_NAMES: tuple[str, ...] = (STYLE_VERBOSE, STYLE_OBFUSCATED)

MIN_SUFFIX = ".min.rb"


def derive_output_path(input_path: str) -> str:
    """app.rb.json → app.min.rb, in the input's directory."""
    directory, base = os.path.split(input_path)
    for ext in (".json", ".rb"):
        if base.endswith(ext) and len(base) > len(ext):
            base = base[: -len(ext)]
    return os.path.join(directory, base + MIN_SUFFIX)


def _error(msg: str) -> None:
    print("error: " + msg, file=sys.stderr)


def read_tree(input_file: str | None) -> tuple[str, int]:
    """Read the tree document. Returns (text, exit_code) where 0 means OK."""
    if input_file is not None:
        try:
            with open(input_file, "rb") as f:
                raw = f.read()
        except OSError:
            _error("cannot open '" + input_file + "'")
            return ("", 1)
    else:
        raw = sys.stdin.buffer.read()
    try:
        return (raw.decode("utf-8"), 0)
    except ValueError:
        _error("invalid utf-8 in input")
        return ("", 1)


def write_output(output: str, output_file: str | None) -> int:
    """Write output to file or stdout. Returns 0 on success, 1 on error."""
    if output_file is not None and output_file != "-":
        try:
            with open(output_file, "w", encoding="utf-8") as f:
                f.write(output + "\n")
        except OSError:
            _error("cannot write '" + output_file + "'")
            return 1
        return 0
    print(output)
    return 0


def minify(text: str, config: RenderConfig) -> tuple[int, str]:
    """Load and render one tree document. Returns (exit_code, output)."""
    try:
        return (0, render_program(loads(text), config))
    except TreeError as e:
        _error("bad tree: " + str(e))
        return (1, "")
    except UnsupportedConstruct as e:
        if e.pos is not None:
            print(
                "error:" + str(e.pos.line) + ":" + str(e.pos.col) + ": " + str(e),
                file=sys.stderr,
            )
        else:
            _error(str(e))
        return (1, "")
    except RecursionError:
        _error("input nested too deeply")
        return (1, "")


def parse_args(
    args: list[str],
) -> tuple[RenderConfig | None, str | None, str | None, int]:
    """Returns (config, input_file, output_file, exit_code); config is None on exit."""
    separator = SEP_NEWLINE
    style = STYLE_VERBOSE
    input_file: str | None = None
    output_file: str | None = None
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return (None, None, None, 0)
        elif arg == "--compact":
            separator = SEP_SEMICOLON
            style = STYLE_OBFUSCATED
            i += 1
        elif arg in ("--separator", "--style", "-o", "--output"):
            if i + 1 >= len(args):
                _error(arg + " requires an argument")
                return (None, None, None, 2)
            value = args[i + 1]
            if arg == "--separator":
                if value not in SEPARATOR_NAMES:
                    _error("unknown separator '" + value + "'")
                    return (None, None, None, 2)
                separator = SEPARATOR_NAMES[value]
            elif arg == "--style":
                if value not in STYLE_NAMES:
                    _error("unknown style '" + value + "'")
                    return (None, None, None, 2)
                style = value
            else:
                output_file = value
            i += 2
        elif arg.startswith("-") and arg != "-":
            _error("unknown flag '" + arg + "'")
            return (None, None, None, 2)
        else:
            if input_file is not None:
                _error("unexpected argument '" + arg + "'")
                return (None, None, None, 2)
            input_file = None if arg == "-" else arg
            i += 1
    return (RenderConfig(separator, style), input_file, output_file, 0)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = argv if argv is not None else sys.argv[1:]
    config, input_file, output_file, code = parse_args(args)
    if config is None:
        return code
    text, err = read_tree(input_file)
    if err != 0:
        return err
    if text.strip() == "":
        _error("no input provided")
        return 2
    exit_code, output = minify(text, config)
    if exit_code != 0:
        return exit_code
    if output_file is None and input_file is not None:
        output_file = derive_output_path(input_file)
    return write_output(output, output_file)


if __name__ == "__main__":
    sys.exit(main())
