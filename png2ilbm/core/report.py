"""Report builder — text and JSON summaries of a conversion."""

import json
import os
from typing import Any

from png2ilbm.core.types import Report


def format_text(report: Report) -> str:
    """One-line human-readable summary."""
    dim = f'{report.width}×{report.height}'
    plural = '' if report.colors == 1 else 's'
    planes = '' if report.bitplanes == 1 else 's'
    line = (
        f'png2ilbm: {report.input_path} ({dim}, {report.colors} colour{plural}, '
        f'{report.bitplanes} bitplane{planes}) → {os.path.basename(report.output_path)} '
        f'({report.bytes_written} bytes)'
    )
    if report.padded_width:
        line += f'\n  note: width {report.width} padded to {(report.width + 7) // 8 * 8} pixels per row'
    return line


def format_json(report: Report) -> str:
    obj: dict[str, Any] = {
        'input': report.input_path,
        'output': report.output_path,
        'dimensions': {'width': report.width, 'height': report.height},
        'colors': report.colors,
        'bitplanes': report.bitplanes,
        'body_bytes': report.body_size,
        'bytes_written': report.bytes_written,
        'padded_width': report.padded_width,
    }
    return json.dumps(obj, indent=2)
