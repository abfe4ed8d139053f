"""png2ilbm — convert an indexed PNG into an IFF ILBM bitmap.

Usage: png2ilbm <input> <output>

The input must be a palette ('P' mode) image with at most 255 colours.
The output is an uncompressed FORM/ILBM file with BMHD, CMAP and BODY
chunks; the body stores ceil(log2(colours)) row-interleaved bitplanes.

Environment variables / .env loading:
  OS environment variables are always used first.
  If a variable is not set, png2ilbm looks for a .env file starting from
  the current directory and walking up, stopping at the nearest .git boundary.

  PNG2ILBM_WIDTH_POLICY=pad|reject  widths that are not a multiple of 8
  PNG2ILBM_PAD_CHUNKS=1             pad odd-length chunks to even length
  PNG2ILBM_JSON=1                   print a JSON summary
  PNG2ILBM_QUIET=1                  print nothing on success
"""

import argparse
import sys

from png2ilbm.convert import convert
from png2ilbm.core.env import load_env, load_settings
from png2ilbm.core.errors import Png2IlbmError
from png2ilbm.core.report import format_json, format_text


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='png2ilbm',
        description='Convert an indexed PNG image into an IFF ILBM file.',
        epilog=(
            'Examples:\n'
            '  png2ilbm sprite.png sprite.iff\n'
            '  PNG2ILBM_WIDTH_POLICY=reject png2ilbm odd.png odd.iff\n'
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument('input', help='Indexed (palette) source image')
    parser.add_argument('output', help='Destination .iff / .ilbm file')
    return parser


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)

    # Load .env before reading settings — OS env vars always win
    env_path = load_env()
    if env_path:
        print(f'png2ilbm: loaded {env_path}', file=sys.stderr)

    try:
        settings = load_settings()
        report = convert(args.input, args.output, settings)
    except Png2IlbmError as e:
        print(f'Error: {e}', file=sys.stderr)
        sys.exit(1)

    if settings.quiet:
        return
    if settings.json:
        print(format_json(report))
    else:
        print(format_text(report))


if __name__ == '__main__':
    main()
