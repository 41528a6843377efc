"""Decoders, one family per upstream schema.

Each decoder raises ``DecodeError`` for a malformed record; the batch
helpers skip bad records and log them.
"""

from stormspine.parsers import geojson, kml, nws, spc, swpc, text
from stormspine.parsers.batch import decode_batch

__all__ = ["decode_batch", "geojson", "kml", "nws", "spc", "swpc", "text"]
