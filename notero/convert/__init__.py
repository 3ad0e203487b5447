from notero.convert.annotation_notes import ImageAnnotationRef, ImageUploader, is_annotation_note
from notero.convert.convert import (
    aconvert_html_to_blocks,
    blocks_to_dicts,
    build_block_batches,
    convert_html_to_blocks,
)
from notero.convert.options import ConversionOptions

__all__ = [
    "ConversionOptions",
    "ImageAnnotationRef",
    "ImageUploader",
    "aconvert_html_to_blocks",
    "blocks_to_dicts",
    "build_block_batches",
    "convert_html_to_blocks",
    "is_annotation_note",
]
