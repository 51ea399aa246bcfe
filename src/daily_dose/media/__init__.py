"""Media ingestion."""

from daily_dose.media.image_encoder import encode_image_bytes, encode_image_file

__all__ = ["encode_image_bytes", "encode_image_file"]
