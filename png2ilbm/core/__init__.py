"""png2ilbm.core — Foundation layer.

Contains the decoder, pixel mapper, ILBM encoder, error types, settings
and report builder. Only stdlib, numpy and PIL are allowed here.
"""
