"""The conversion pipeline: decode → build → encode → write.

Nothing is written until the whole image has been validated and encoded,
so a failed conversion never leaves a partial output file behind.
"""

from png2ilbm.core import decoder, encoder, mapper
from png2ilbm.core.types import Report, Settings


def convert(input_path: str, output_path: str, settings: Settings | None = None) -> Report:
    """Convert one indexed image file into an ILBM file."""
    settings = settings or Settings()
    decoded = decoder.decode(input_path)
    image = mapper.build(decoded, width_policy=settings.width_policy)

    report = Report.from_image(image, input_path, output_path)
    report.body_size = image.height * image.bitplanes * encoder.row_bytes(image.width)
    report.bytes_written = encoder.write(image, output_path, pad_chunks=settings.pad_chunks)
    return report
