"""Command-line front end for the autocontrast algorithms."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

from improclab.common import AutocontrastType, ExitCode
from improclab.contrast import autocontrast, autocontrast_rgb
from improclab.imageinfo import read_image, write_image

HELP_TEXT = (
    "This program should be supplied with 5 arguments in total. "
    "They should be entered as follows: \n"
    " 1) autocontrast type (rgb | naive) \n"
    " 2) image path \n"
    " 3) black quantile \n"
    " 4) white quantile \n"
    " 5) output image path"
)


class _ParamsError(ValueError):
    """Invalid command line; carries the exit code and where to print the message."""

    def __init__(self, message: str, code: ExitCode, is_help: bool = False) -> None:
        super().__init__(message)
        self.code = code
        self.is_help = is_help


@dataclass(frozen=True)
class Params:
    """Validated command-line parameters."""

    autocontrast_type: AutocontrastType
    input_image: Path
    black_quantile: float
    white_quantile: float
    output_image: Path


def parse_params(argv) -> Params:
    """Validate the five command-line arguments; raise ValueError when they are wrong."""
    args = list(argv)
    if not args:
        raise _ParamsError(f"{HELP_TEXT}; Terminating...", ExitCode.INVALID_PARAMETER)
    if len(args) == 1 or args[0] == "help":
        raise _ParamsError(HELP_TEXT, ExitCode.INVALID_NAME, is_help=True)
    if len(args) != 5:
        raise _ParamsError("Incorrect input; Terminating...", ExitCode.INVALID_PARAMETER)
    try:
        kind = AutocontrastType(args[0])
    except ValueError:
        raise _ParamsError("type help to get help", ExitCode.INVALID_PARAMETER) from None
    try:
        black = float(args[2])
        white = float(args[3])
    except ValueError as ex:
        raise _ParamsError(str(ex), ExitCode.INVALID_PARAMETER) from None
    return Params(kind, Path(args[1]), black, white, Path(args[4]))


def main(argv=None) -> int:
    """Read an image, apply the chosen autocontrast and write the result."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        params = parse_params(args)
    except _ParamsError as err:
        print(err, file=sys.stdout if err.is_help else sys.stderr)
        return err.code

    try:
        img = read_image(params.input_image)
        if params.autocontrast_type is AutocontrastType.RGB:
            out = autocontrast_rgb(img, params.black_quantile, params.white_quantile)
        else:
            out = autocontrast(img, params.black_quantile, params.white_quantile)
        write_image(params.output_image, out)
    except (OSError, ValueError) as ex:
        print(ex, file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())